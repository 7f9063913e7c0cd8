"""vbuilder-composer 命令行接口

在 Composer 之外手动触发插件：读取项目目录下已安装的依赖状态，
按 post-autoload-dump 事件的流程重新生成文件。
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from vbuilder_composer import __version__
from vbuilder_composer.core.config import DEFAULT_CONFIG_FILE, Config, init_config
from vbuilder_composer.core.exceptions import VBuilderError
from vbuilder_composer.core.plugin import VBuilderPlugin
from vbuilder_composer.core.repository import ComposerProject
from vbuilder_composer.plugins import POST_AUTOLOAD_DUMP, EventDispatcher
from vbuilder_composer.utils.logger import setup_logging
from vbuilder_composer.utils.yaml_io import dump_yaml

_project_dir_option = click.option(
    "--project-dir", "-d", default=".", show_default=True,
    type=click.Path(file_okay=False, exists=True),
    help="项目根目录（composer.json 所在目录）",
)
_config_option = click.option(
    "--config", "-c", "config_path", default=None,
    help=f"配置文件路径（默认 <project-dir>/{DEFAULT_CONFIG_FILE}）",
)


def _load(project_dir: str, config_path: str | None, **overrides: object) -> Config:
    path = config_path or str(Path(project_dir) / DEFAULT_CONFIG_FILE)
    cfg = init_config(path, project_dir=project_dir, **overrides)
    setup_logging(
        level=os.getenv("VBUILDER_LOG_LEVEL", cfg.log_level),
        json_output=os.getenv("VBUILDER_LOG_JSON", "") == "1" or cfg.log_json,
    )
    return cfg


def _activate(cfg: Config) -> tuple[VBuilderPlugin, EventDispatcher]:
    dispatcher = EventDispatcher()
    plugin = VBuilderPlugin(cfg)
    plugin.activate(ComposerProject.load(cfg), dispatcher)
    return plugin, dispatcher


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """vbuilder-composer - vBuilder 启动文件与伪 autoload 文件生成"""


@main.command()
@_project_dir_option
@_config_option
@click.option("--no-assume-unchanged", is_flag=True, help="不对伪 autoload 文件执行 git update-index")
def dump(project_dir: str, config_path: str | None, no_assume_unchanged: bool) -> None:
    """触发 post-autoload-dump，重新生成全部文件"""
    overrides: dict[str, object] = {}
    if no_assume_unchanged:
        overrides["mark_assume_unchanged"] = False
    try:
        cfg = _load(project_dir, config_path, **overrides)
        _, dispatcher = _activate(cfg)
        paths = dispatcher.dispatch(POST_AUTOLOAD_DUMP)
    except VBuilderError as e:
        raise click.ClickException(str(e)) from e
    for path in paths:
        click.echo(str(path))


@main.command(name="packages")
@_project_dir_option
@_config_option
def list_packages(project_dir: str, config_path: str | None) -> None:
    """列出收集到的包（根包在前）及其安装路径"""
    try:
        cfg = _load(project_dir, config_path)
        plugin, _ = _activate(cfg)
        collector, packages = plugin.collect()
    except VBuilderError as e:
        raise click.ClickException(str(e)) from e
    for pkg in packages:
        click.echo(f"  {pkg.name:40s} {pkg.version or '-':16s} {collector.install_path(pkg)}")


@main.command(name="params")
@_project_dir_option
@_config_option
def show_params(project_dir: str, config_path: str | None) -> None:
    """以 YAML 打印聚合后的参数、配置文件与扩展"""
    try:
        cfg = _load(project_dir, config_path)
        plugin, _ = _activate(cfg)
        result = plugin.aggregate()
    except VBuilderError as e:
        raise click.ClickException(str(e)) from e
    click.echo(dump_yaml({
        "parameters": result.parameters,
        "config_files": result.config_files,
        "extensions": result.extensions,
        "fake_autoloader_files": [
            {"package": r.package.name, "path": r.target_path}
            for r in result.fake_autoload_requests
        ],
    }), nl=False)


if __name__ == "__main__":
    main()
