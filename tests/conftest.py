"""测试共享 fixture — 在 tmp_path 下搭建假的 Composer 项目

  <tmp>/app/composer.json
  <tmp>/app/vendor/composer/installed.json
  <tmp>/app/vendor/<vendor>/<project>/...

以及记录 git 调用的假命令执行器。
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

import vbuilder_composer.core.config as cfgmod
from vbuilder_composer.core.config import Config
from vbuilder_composer.core.repository import ComposerProject
from vbuilder_composer.utils.logger import reset_logging
from vbuilder_composer.utils.shell import CommandResult


@dataclass
class RecordingExecutor:
    """记录每次调用，返回预设退出码"""

    returncode: int = 0
    calls: list[dict[str, Any]] = field(default_factory=list)

    def execute(self, cmd, *, cwd: str = ".", timeout: int | None = None) -> CommandResult:
        self.calls.append({"cmd": cmd, "cwd": cwd})
        return CommandResult(returncode=self.returncode, stderr="fatal" if self.returncode else "")


class ProjectBuilder:
    """按需构造项目目录、依赖包与 installed.json"""

    def __init__(self, root: Path, root_name: str = "acme/app") -> None:
        self.base = root
        self.vendor = root / "vendor"
        self.root_manifest: dict[str, Any] = {"name": root_name}
        self.entries: list[dict[str, Any]] = []
        self.base.mkdir(parents=True, exist_ok=True)
        self.vendor.joinpath("composer").mkdir(parents=True, exist_ok=True)

    def add_package(
        self,
        name: str,
        *,
        version: str = "1.0.0",
        extra: Any = None,
        config_neon: bool = False,
        dirs: tuple[str, ...] = (),
        git: bool = False,
        install_path: str | None = None,
    ) -> Path:
        entry: dict[str, Any] = {"name": name, "version": version}
        if extra is not None:
            entry["extra"] = extra
        if install_path is not None:
            entry["install-path"] = install_path
            pkg_dir = (self.vendor / "composer" / install_path).resolve()
        else:
            pkg_dir = self.vendor / name
        pkg_dir.mkdir(parents=True, exist_ok=True)
        if config_neon:
            (pkg_dir / "config.neon").write_text("parameters:\n", encoding="utf-8")
        for d in dirs:
            (pkg_dir / d).mkdir(parents=True, exist_ok=True)
        if git:
            (pkg_dir / ".git").mkdir(exist_ok=True)
        self.entries.append(entry)
        return pkg_dir

    def write(self, *, composer2: bool = True) -> Path:
        (self.base / "composer.json").write_text(
            json.dumps(self.root_manifest), encoding="utf-8",
        )
        data: Any = {"packages": self.entries, "dev": True} if composer2 else self.entries
        (self.vendor / "composer" / "installed.json").write_text(
            json.dumps(data), encoding="utf-8",
        )
        return self.base

    def config(self, **kwargs: Any) -> Config:
        return Config(project_dir=str(self.base), **kwargs)

    def load(self, **kwargs: Any) -> ComposerProject:
        self.write()
        return ComposerProject.load(self.config(**kwargs))


@pytest.fixture()
def project(tmp_path: Path) -> ProjectBuilder:
    return ProjectBuilder(tmp_path.resolve() / "app")


@pytest.fixture()
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    """每个测试使用独立的全局配置与日志状态"""
    monkeypatch.setattr(cfgmod, "_current", None)
    reset_logging()
    yield
    reset_logging()
