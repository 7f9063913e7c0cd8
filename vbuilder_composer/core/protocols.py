"""宿主协议定义

插件只通过这里的接口读取宿主（Composer）的状态，
具体实现见 repository.py；测试可注入内存实现。
"""

from __future__ import annotations

from typing import Protocol

from vbuilder_composer.core.models import Package, RootPackage


class PackageRepository(Protocol):
    """本地已安装包仓库（installed.json）"""

    def get_packages(self) -> list[Package]:
        """按仓库顺序返回全部包，可能包含别名包"""
        ...


class InstallPathResolver(Protocol):
    """非根包的安装路径解析"""

    def get_install_path(self, package: Package) -> str:
        """返回包的绝对安装路径"""
        ...


class ComposerContext(Protocol):
    """插件激活时宿主交给插件的上下文"""

    base_path: str
    vendor_dir: str
    root_package: RootPackage
    repository: PackageRepository
    installation_manager: InstallPathResolver
