"""vBuilder 启动文件生成器

把聚合结果渲染为 <vendor>/composer/vbuilder_bootstrap.php：

    class vBuilderBootstrap<suffix> {
        static function init(Nette\\Configurator $configurator) {
            addParameters(...)   # 包安装路径参数
            addConfig(...)       # 每个 config.neon 一次
            onCompile[] = ...    # 注册框架扩展
        }
    }
    vBuilderBootstrap<suffix>::init($configurator);

类名带随机后缀，同一进程内多次重新生成并 include 时不会重复声明。
除后缀外，相同输入总是产生逐字节相同的输出。
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from vbuilder_composer.core.models import AggregationResult
from vbuilder_composer.core.path_translator import relativize
from vbuilder_composer.core.php_export import export, export_key
from vbuilder_composer.utils.fs import find_shortest_path
from vbuilder_composer.utils.yaml_io import atomic_write

logger = logging.getLogger(__name__)

GENERATED_HEADER = """<?php

/**
 * @warning This file is automatically generated by Composer.
 * @see https://github.com/vbuilder/composer-plugin
 */
"""

_TEMPLATE = GENERATED_HEADER + """
class vBuilderBootstrap%(suffix)s {

\tstatic function init(Nette\\Configurator $configurator) {

\t\t$vendorDir = __DIR__ . '/..';

\t\t// Container parameters
\t\t$configurator->addParameters(%(parameters)s);

\t\t// NEON config files
\t\t%(config_files)s

\t\t// Nette extensions
\t\t%(extensions)s
\t}

}

vBuilderBootstrap%(suffix)s::init($configurator);


"""

_NONE = "// None.\n\t\t"


def new_suffix() -> str:
    return uuid.uuid4().hex


class BootstrapGenerator:
    """渲染并写出启动文件"""

    def __init__(
        self,
        vendor_dir: str,
        base_path: str,
        bootstrap_file: str = "composer/vbuilder_bootstrap.php",
    ) -> None:
        self.vendor_dir = vendor_dir.rstrip("/")
        self.base_path = base_path
        self.path = Path(f"{self.vendor_dir}/{bootstrap_file}")

    def render(self, result: AggregationResult, suffix: str) -> str:
        """渲染启动文件内容（纯函数，不写盘）"""
        return _TEMPLATE % {
            "suffix": suffix,
            "parameters": self._render_parameters(result),
            "config_files": self._render_config_files(result.config_files),
            "extensions": self._render_extensions(result.extensions),
        }

    def generate(self, result: AggregationResult, suffix: str | None = None) -> Path:
        """整体覆盖写出启动文件，写入失败直接抛出 OSError"""
        content = self.render(result, suffix or new_suffix())
        display = find_shortest_path(self.base_path, str(self.path))
        logger.info("生成 %s", display)
        atomic_write(self.path, content)
        return self.path

    def _render_parameters(self, result: AggregationResult) -> str:
        exported = export(relativize(result.parameters, self.vendor_dir))
        return exported.replace("\n", "\n\t\t")

    def _render_config_files(self, config_files: list[str]) -> str:
        if not config_files:
            return _NONE
        return "".join(
            f"$configurator->addConfig({export(relativize(f, self.vendor_dir))});\n\t\t"
            for f in config_files
        )

    @staticmethod
    def _render_extensions(extensions: dict[str | int, str]) -> str:
        if not extensions:
            return _NONE
        lines = ["$configurator->onCompile[] = function ($configurator, $compiler) {"]
        for name, class_name in extensions.items():
            lines.append(
                f"\n\t\t\t$compiler->addExtension({export_key(name)}, new {class_name});"
            )
        lines.append("\n\t\t};\n\t\t")
        return "".join(lines)
