"""宿主状态读取 — composer.json 与 vendor/composer/installed.json

职责:
- 读取根包（composer.json）与 vendor 目录配置
- 读取本地已安装包仓库，兼容 Composer 1（列表）与 Composer 2（{"packages": [...]}）格式
- 按 extra.branch-alias 生成别名包，与 Composer 加载器行为一致
- 解析非根包的安装路径
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vbuilder_composer.core.config import Config
from vbuilder_composer.core.exceptions import RepositoryError
from vbuilder_composer.core.metadata import as_mapping
from vbuilder_composer.core.models import AliasPackage, Package, RootPackage
from vbuilder_composer.utils.fs import is_absolute_path, normalize_path
from vbuilder_composer.utils.yaml_io import load_json

logger = logging.getLogger(__name__)

ROOT_MANIFEST = "composer.json"
INSTALLED_FILE = "composer/installed.json"
DEFAULT_VENDOR_DIR = "vendor"
DEFAULT_ROOT_NAME = "__root__"


def _read_json(path: Path) -> Any:
    try:
        return load_json(path)
    except (OSError, ValueError) as e:
        raise RepositoryError(f"无法读取 {path}: {e}") from e


def load_root_package(project_dir: str | Path) -> RootPackage:
    """从 composer.json 构造根包"""
    manifest = Path(project_dir) / ROOT_MANIFEST
    data = _read_json(manifest)
    if data is None:
        raise RepositoryError(f"根包清单不存在: {manifest}")
    if not isinstance(data, dict):
        raise RepositoryError(f"根包清单格式错误: {manifest}")
    return RootPackage(
        name=str(data.get("name") or DEFAULT_ROOT_NAME),
        version=str(data.get("version", "")),
        extra=data.get("extra", {}),
    )


def resolve_vendor_dir(project_dir: str | Path, configured: str = "") -> str:
    """vendor 目录绝对路径：显式配置 > composer.json config.vendor-dir > "vendor" """
    vendor = configured
    if not vendor:
        data = _read_json(Path(project_dir) / ROOT_MANIFEST)
        root_config = as_mapping(
            data.get("config") if isinstance(data, dict) else None,
            context="composer.json config",
        )
        vendor = str(root_config.get("vendor-dir") or DEFAULT_VENDOR_DIR)
    if not is_absolute_path(vendor):
        vendor = os.path.join(project_dir, vendor)
    return normalize_path(os.path.realpath(vendor))


class InstalledRepository:
    """本地已安装包仓库 — 读取 vendor/composer/installed.json"""

    def __init__(self, vendor_dir: str) -> None:
        self.vendor_dir = vendor_dir
        self.installed_file = Path(vendor_dir) / INSTALLED_FILE
        self._packages: list[Package] | None = None

    def get_packages(self) -> list[Package]:
        if self._packages is None:
            self._packages = self._load()
        return list(self._packages)

    def _load(self) -> list[Package]:
        data = _read_json(self.installed_file)
        if data is None:
            logger.debug("installed.json 不存在，视为空仓库: %s", self.installed_file)
            return []

        # Composer 2: {"packages": [...], "dev": true, ...}
        entries = data.get("packages") if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise RepositoryError(f"installed.json 格式错误: {self.installed_file}")

        packages: list[Package] = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("name"):
                raise RepositoryError(
                    f"installed.json 中存在无效的包条目: {json.dumps(entry)[:200]}"
                )
            pkg = Package(
                name=str(entry["name"]),
                version=str(entry.get("version", "")),
                extra=entry.get("extra", {}),
                install_path=str(entry.get("install-path", "")),
            )
            packages.append(pkg)
            alias = self._branch_alias(pkg)
            if alias is not None:
                packages.append(alias)

        logger.debug("已加载 %d 个已安装包", len(packages))
        return packages

    @staticmethod
    def _branch_alias(pkg: Package) -> AliasPackage | None:
        """dev 分支包若在 extra.branch-alias 中声明了别名，则生成对应的别名包"""
        extra = pkg.extra if isinstance(pkg.extra, dict) else {}
        aliases = extra.get("branch-alias")
        if not isinstance(aliases, dict):
            return None
        alias_version = aliases.get(pkg.version)
        if not isinstance(alias_version, str) or not alias_version:
            return None
        return AliasPackage(
            name=pkg.name,
            version=alias_version,
            extra=pkg.extra,
            install_path=pkg.install_path,
            alias_of=pkg,
        )


class InstallationManager:
    """非根包安装路径解析

    优先使用 installed.json 记录的 install-path（相对 vendor/composer），
    否则按默认布局 <vendor>/<name>。
    """

    def __init__(self, vendor_dir: str) -> None:
        self.vendor_dir = vendor_dir

    def get_install_path(self, package: Package) -> str:
        while isinstance(package, AliasPackage) and package.alias_of is not None:
            package = package.alias_of

        if package.install_path:
            if is_absolute_path(package.install_path):
                return normalize_path(package.install_path)
            return normalize_path(
                f"{self.vendor_dir}/composer/{package.install_path}"
            )
        return normalize_path(f"{self.vendor_dir}/{package.name}")


@dataclass
class ComposerProject:
    """一个 Composer 项目的宿主上下文（满足 ComposerContext 协议）"""

    base_path: str
    vendor_dir: str
    root_package: RootPackage
    repository: InstalledRepository
    installation_manager: InstallationManager

    @classmethod
    def load(cls, config: Config) -> ComposerProject:
        """按配置读取项目目录下的 composer.json 与 installed.json"""
        base_path = normalize_path(os.path.realpath(config.project_dir))
        vendor_dir = resolve_vendor_dir(base_path, config.vendor_dir)
        logger.debug("项目目录: %s, vendor 目录: %s", base_path, vendor_dir)
        return cls(
            base_path=base_path,
            vendor_dir=vendor_dir,
            root_package=load_root_package(base_path),
            repository=InstalledRepository(vendor_dir),
            installation_manager=InstallationManager(vendor_dir),
        )
