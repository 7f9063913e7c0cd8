"""宿主事件分发

模拟 Composer 的脚本事件：插件通过 get_subscribed_events() 声明
{事件名: 方法名}，激活时注册到分发器，宿主在对应时机 dispatch。

监听器抛出的异常原样向上传播，伪 autoload 的 git 标记失败必须中止整个流程。
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

POST_AUTOLOAD_DUMP = "post-autoload-dump"

KNOWN_EVENTS = (
    "pre-autoload-dump",
    POST_AUTOLOAD_DUMP,
    "post-install-cmd",
    "post-update-cmd",
)


class EventDispatcher:
    """事件监听器注册表"""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[..., Any]]] = {
            name: [] for name in KNOWN_EVENTS
        }

    def add_listener(self, event: str, callback: Callable[..., Any]) -> None:
        if event not in self._listeners:
            raise ValueError(f"未知的事件: {event}")
        self._listeners[event].append(callback)

    def add_subscriber(self, subscriber: Any) -> None:
        """按 subscriber.get_subscribed_events() 注册其方法"""
        for event, method in subscriber.get_subscribed_events().items():
            self.add_listener(event, getattr(subscriber, method))

    def dispatch(self, event: str, **kwargs: Any) -> list[Any]:
        """依次调用监听器，返回各自的返回值"""
        if event not in self._listeners:
            raise ValueError(f"未知的事件: {event}")
        listeners = self._listeners[event]
        logger.debug("分发事件 %s -> %d 个监听器", event, len(listeners))
        return [callback(**kwargs) for callback in listeners]
