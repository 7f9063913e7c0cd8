"""extra 元数据的容错读取

composer.json 的 extra 块是任意嵌套的无类型文档。每个读取点都经过这里的
转换函数：形状不符时记录警告并退化为空集合，单个包的错误配置不会中断整体生成。
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def _describe(value: Any) -> str:
    return type(value).__name__


def as_mapping(value: Any, *, context: str = "") -> dict[str, Any]:
    """转换为映射；None 视为空，其他非字典值记录警告后返回空字典"""
    # PHP 把空数组编码成 []
    if value is None or value == []:
        return {}
    if isinstance(value, dict):
        return value
    logger.warning("%s 应为映射，实际为 %s，已忽略", context or "元数据", _describe(value))
    return {}


def as_string_list(value: Any, *, context: str = "") -> list[str]:
    """转换为字符串列表

    - 字符串 -> 单元素列表
    - 列表 -> 其中的字符串元素（非字符串元素跳过并警告）
    - 映射 -> 取其值（同列表规则）
    - 其他 -> 空列表并警告
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, dict):
        value = list(value.values())
    if not isinstance(value, list):
        logger.warning(
            "%s 应为字符串或字符串列表，实际为 %s，已忽略",
            context or "元数据", _describe(value),
        )
        return []

    result: list[str] = []
    for item in value:
        if isinstance(item, str):
            result.append(item)
        else:
            logger.warning("%s 中的元素 %r 不是字符串，已跳过", context or "元数据", item)
    return result


def as_string_map(value: Any, *, context: str = "") -> dict[str | int, str]:
    """转换为 名称 -> 字符串 映射

    - 映射 -> 键转为字符串，只保留字符串值
    - 列表 -> 以整数下标作为名称（与 PHP 数组键一致）
    - 其他 -> 空映射并警告
    """
    if value is None:
        return {}
    items: list[tuple[str | int, Any]]
    if isinstance(value, dict):
        items = [(str(k), v) for k, v in value.items()]
    elif isinstance(value, list):
        items = list(enumerate(value))
    else:
        logger.warning(
            "%s 应为映射或列表，实际为 %s，已忽略", context or "元数据", _describe(value),
        )
        return {}

    result: dict[str | int, str] = {}
    for key, item in items:
        if isinstance(item, str):
            result[key] = item
        else:
            logger.warning("%s 中 %s 的值不是字符串，已跳过", context or "元数据", key)
    return result


def namespace_block(extra: Any, namespace: str, *, package_name: str = "") -> dict[str, Any]:
    """读取 extra.<namespace> 块，任何一层形状不符都返回空字典"""
    label = f"{package_name} 的 extra" if package_name else "extra"
    extra_map = as_mapping(extra, context=label)
    return as_mapping(extra_map.get(namespace), context=f"{label}.{namespace}")
