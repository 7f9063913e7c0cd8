"""伪 autoload 文件生成器

部分包（或 IDE / 旧工具）期望在包自身目录下找到 autoload 入口。
这里在包声明的位置写一个转发文件，include 真正的 <vendor>/autoload.php。

目标目录不存在时只记录日志并跳过；包本身是 git 工作区时，
把生成的文件标记为 assume-unchanged，标记失败属于致命错误。
"""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path
from typing import Callable

from vbuilder_composer.core.bootstrap import GENERATED_HEADER
from vbuilder_composer.core.exceptions import VcsError
from vbuilder_composer.core.models import Package
from vbuilder_composer.core.php_export import quote
from vbuilder_composer.utils.fs import find_shortest_path, normalize_path
from vbuilder_composer.utils.shell import CommandExecutor, get_executor
from vbuilder_composer.utils.yaml_io import atomic_write

logger = logging.getLogger(__name__)


def render_forwarder(relative_vendor_dir: str) -> str:
    """转发文件内容；relative_vendor_dir 为从文件所在目录到 vendor 目录的相对路径"""
    autoload = "/" + relative_vendor_dir.rstrip("/") + "/autoload.php"
    return f"{GENERATED_HEADER}\nreturn include __DIR__ . {quote(autoload)};\n"


class FakeAutoloaderGenerator:
    """在包目录中写出指向真实 autoload.php 的转发文件"""

    def __init__(
        self,
        vendor_dir: str,
        base_path: str,
        install_path: Callable[[Package], str],
        *,
        executor: CommandExecutor | None = None,
        mark_assume_unchanged: bool = True,
    ) -> None:
        self.vendor_dir = vendor_dir
        self.base_path = base_path
        self.install_path = install_path
        self.executor = executor
        self.mark_assume_unchanged = mark_assume_unchanged

    def generate(self, package: Package, target_path: str) -> Path | None:
        """生成伪 autoload 文件，目标目录不存在时返回 None

        参数:
            package: 声明该文件的包
            target_path: 相对包安装目录的目标路径

        异常:
            OSError: 写入失败
            VcsError: git update-index 返回非零
        """
        if posixpath.basename(target_path) in ("", ".", ".."):
            logger.warning("跳过伪 autoload 文件生成（路径没有文件名）: %s: %r", package.name, target_path)
            return None

        package_dir = self.install_path(package)
        target_dir = normalize_path(f"{package_dir}/{posixpath.dirname(target_path)}")
        target_file = f"{target_dir}/{posixpath.basename(target_path)}"
        display = find_shortest_path(self.base_path, target_file)

        if not os.path.isdir(target_dir):
            logger.info("跳过伪 autoload 文件生成（目录不存在）: %s", display)
            return None

        relative = find_shortest_path(target_dir, self.vendor_dir, directories=True)

        logger.info("生成伪 autoload 文件: %s", display)
        atomic_write(Path(target_file), render_forwarder(relative))

        if self.mark_assume_unchanged and os.path.isdir(f"{package_dir}/.git"):
            self._assume_unchanged(package_dir, target_file, display)

        return Path(target_file)

    def _assume_unchanged(self, package_dir: str, target_file: str, display: str) -> None:
        executor = self.executor or get_executor()
        relative = os.path.relpath(target_file, package_dir).replace(os.sep, "/")
        result = executor.execute(
            [
                "git",
                "--git-dir", f"{package_dir}/.git",
                "--work-tree", package_dir,
                "update-index", "--assume-unchanged", relative,
            ],
            cwd=package_dir,
        )
        if not result.success:
            raise VcsError(f"Failed to mark {display} as unchanged", path=display)
        logger.debug("已标记 assume-unchanged: %s", display)
