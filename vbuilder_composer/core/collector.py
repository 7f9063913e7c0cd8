"""包收集器

产出去重、已解析别名的包列表：根包在前，其后按本地仓库顺序排列依赖包。
"""

from __future__ import annotations

import logging

from vbuilder_composer.core.exceptions import RepositoryError
from vbuilder_composer.core.models import AliasPackage, Package, RootPackage
from vbuilder_composer.core.protocols import ComposerContext

logger = logging.getLogger(__name__)

# 别名链解析上限，超过即视为别名图损坏（环）
MAX_ALIAS_DEPTH = 32


def resolve_alias(package: Package) -> Package:
    """沿 alias_of 解析到实体包"""
    current = package
    for _ in range(MAX_ALIAS_DEPTH):
        if not isinstance(current, AliasPackage):
            return current
        if current.alias_of is None:
            raise RepositoryError(f"别名包 {current.name}@{current.version} 没有指向实体包")
        current = current.alias_of
    raise RepositoryError(
        f"corrupt alias graph: {package.name}@{package.version} "
        f"超过 {MAX_ALIAS_DEPTH} 层仍未解析到实体包"
    )


class PackageCollector:
    """收集全部已安装包（含根包）并解析安装路径"""

    def __init__(self, context: ComposerContext) -> None:
        self.context = context
        self._install_paths: dict[str, str] = {}

    def collect(self) -> list[Package]:
        """返回去重后的包列表，根包在前；首次出现者保留"""
        candidates: list[Package] = [self.context.root_package]
        candidates.extend(self.context.repository.get_packages())

        packages: list[Package] = []
        for candidate in candidates:
            pkg = resolve_alias(candidate)
            if pkg not in packages:
                packages.append(pkg)

        logger.debug("收集到 %d 个包（含根包）", len(packages))
        return packages

    def install_path(self, package: Package) -> str:
        """根包返回项目目录，其他包交给安装管理器解析"""
        if isinstance(package, RootPackage):
            return self.context.base_path

        cached = self._install_paths.get(package.name)
        if cached is None:
            cached = self.context.installation_manager.get_install_path(package)
            self._install_paths[package.name] = cached
        return cached
