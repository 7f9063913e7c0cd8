"""元数据聚合器

遍历收集到的包，把各包信息折叠成一份 AggregationResult:

  - 参数表 pkg.<vendor>.<project>.dir（单段包名为 pkg.<name>.dir）
  - 包根目录下的 config.neon
  - extra.vbuilder.extensions 声明的框架扩展
  - extra.vbuilder.fake-autoloader-files 声明的伪 autoload 文件

每次调用都从空结果开始，不保留跨调用状态。
extra 形状错误只记录警告，不会中断其余包的处理。
"""

from __future__ import annotations

import logging
import os
import posixpath
from typing import Any, Callable

from vbuilder_composer.core.metadata import as_string_list, as_string_map, namespace_block
from vbuilder_composer.core.models import AggregationResult, FakeAutoloadRequest, Package

logger = logging.getLogger(__name__)

EXTENSIONS_KEY = "extensions"
FAKE_AUTOLOADER_KEY = "fake-autoloader-files"


class MetadataAggregator:
    """把包列表折叠为启动文件所需的参数、配置文件与扩展"""

    def __init__(
        self,
        install_path: Callable[[Package], str],
        *,
        config_file_name: str = "config.neon",
        namespace: str = "vbuilder",
    ) -> None:
        self.install_path = install_path
        self.config_file_name = config_file_name
        self.namespace = namespace

    def aggregate(self, packages: list[Package]) -> AggregationResult:
        result = AggregationResult()
        for pkg in packages:
            self._add_package(result, pkg)

        result.parameters["pkg"] = dict(sorted(result.parameters["pkg"].items()))
        logger.debug(
            "聚合完成: %d 个包, %d 个配置文件, %d 个扩展, %d 个伪 autoload 文件",
            len(packages), len(result.config_files),
            len(result.extensions), len(result.fake_autoload_requests),
        )
        return result

    def _add_package(self, result: AggregationResult, pkg: Package) -> None:
        install_path = self.install_path(pkg)

        # 参数表
        parent, key = self._parameter_slot(result.parameters["pkg"], pkg.name)
        parent[key] = {"dir": install_path}

        # 配置文件
        config_file = f"{install_path}/{self.config_file_name}"
        if os.path.isfile(config_file):
            result.config_files.append(config_file)

        block = namespace_block(pkg.extra, self.namespace, package_name=pkg.name)

        # 框架扩展（同名时后者覆盖）
        extensions = as_string_map(
            block.get(EXTENSIONS_KEY),
            context=f"{pkg.name}: extra.{self.namespace}.{EXTENSIONS_KEY}",
        )
        for name, class_name in extensions.items():
            previous = result.extensions.get(name)
            if previous is not None and previous != class_name:
                logger.debug("扩展 %s: %s 覆盖 %s (%s)", name, class_name, previous, pkg.name)
            result.extensions[name] = class_name

        # 伪 autoload 文件
        files = as_string_list(
            block.get(FAKE_AUTOLOADER_KEY),
            context=f"{pkg.name}: extra.{self.namespace}.{FAKE_AUTOLOADER_KEY}",
        )
        for path in files:
            # 必须指向文件，"" 或 "tests/" 会落到目录本身
            if posixpath.basename(path) in ("", ".", ".."):
                logger.warning(
                    "%s: 伪 autoload 路径 %r 没有文件名，已跳过", pkg.name, path,
                )
                continue
            result.fake_autoload_requests.append(
                FakeAutoloadRequest(package=pkg, target_path=path),
            )

    @staticmethod
    def _parameter_slot(tree: dict[str, Any], name: str) -> tuple[dict[str, Any], str]:
        """返回 (父映射, 键)：vendor/project 两级嵌套，其余按首段平铺"""
        tokens = name.split("/")
        if len(tokens) == 2:
            vendor = tree.get(tokens[0])
            if not isinstance(vendor, dict):
                vendor = tree[tokens[0]] = {}
            return vendor, tokens[1]
        return tree, tokens[0]
