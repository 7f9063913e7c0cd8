"""vBuilder Composer 插件

订阅 post-autoload-dump 事件，每次 autoload 重新生成后:

  PackageCollector -> MetadataAggregator -> FakeAutoloaderGenerator（逐个请求）
                                          -> BootstrapGenerator

所有中间状态都在一次调用内构建和消费，插件实例本身不保留运行结果。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from vbuilder_composer.core.aggregator import MetadataAggregator
from vbuilder_composer.core.bootstrap import BootstrapGenerator
from vbuilder_composer.core.collector import PackageCollector
from vbuilder_composer.core.config import Config, get_config
from vbuilder_composer.core.fake_autoloader import FakeAutoloaderGenerator
from vbuilder_composer.core.models import AggregationResult, Package
from vbuilder_composer.core.protocols import ComposerContext
from vbuilder_composer.plugins import POST_AUTOLOAD_DUMP, EventDispatcher
from vbuilder_composer.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class VBuilderPlugin:
    """读取各包 composer.json 中的 extra.vbuilder 设置"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config or get_config()
        self.executor = executor
        self.context: ComposerContext | None = None

    def activate(self, context: ComposerContext, dispatcher: EventDispatcher) -> None:
        self.context = context
        dispatcher.add_subscriber(self)

    @staticmethod
    def get_subscribed_events() -> dict[str, str]:
        return {POST_AUTOLOAD_DUMP: "on_post_autoload_dump"}

    # ------------------------------------------------------------------
    # 组件装配
    # ------------------------------------------------------------------

    def _require_context(self) -> ComposerContext:
        if self.context is None:
            raise RuntimeError("插件尚未激活")
        return self.context

    def collector(self) -> PackageCollector:
        return PackageCollector(self._require_context())

    def collect(self) -> tuple[PackageCollector, list[Package]]:
        collector = self.collector()
        return collector, collector.collect()

    def aggregate(self) -> AggregationResult:
        collector, packages = self.collect()
        return self._aggregator(collector).aggregate(packages)

    def _aggregator(self, collector: PackageCollector) -> MetadataAggregator:
        return MetadataAggregator(
            collector.install_path,
            config_file_name=self.config.config_file_name,
            namespace=self.config.extra_namespace,
        )

    # ------------------------------------------------------------------
    # 事件处理
    # ------------------------------------------------------------------

    def on_post_autoload_dump(self, **_: Any) -> Path:
        """生成伪 autoload 文件与启动文件，返回启动文件路径"""
        context = self._require_context()
        collector, packages = self.collect()
        result = self._aggregator(collector).aggregate(packages)

        fake = FakeAutoloaderGenerator(
            context.vendor_dir,
            context.base_path,
            collector.install_path,
            executor=self.executor,
            mark_assume_unchanged=self.config.mark_assume_unchanged,
        )
        for request in result.fake_autoload_requests:
            fake.generate(request.package, request.target_path)

        bootstrap = BootstrapGenerator(
            context.vendor_dir,
            context.base_path,
            bootstrap_file=self.config.bootstrap_file,
        )
        return bootstrap.generate(result)
