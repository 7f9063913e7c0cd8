"""PHP 字面量导出

生成与 PHP var_export() 相同布局的数组/标量字面量，
使生成的启动文件与 Composer 插件历史输出逐字节一致。

VendorPath 是独立的表达式节点：导出为 `$vendorDir . '/rel'`，
不经过字符串替换。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

# PHP 会把十进制整数形式的字符串键转换为整数键
_INT_KEY_RE = re.compile(r"^(0|-?[1-9][0-9]*)\Z")


@dataclass(frozen=True)
class VendorPath:
    """相对 vendor 目录的路径（relative 为空或以 / 开头）"""

    relative: str = ""


def quote(value: str) -> str:
    """PHP 单引号字符串字面量"""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    escaped = escaped.replace("\0", "' . \"\\0\" . '")
    return f"'{escaped}'"


def export(value: Any) -> str:
    """导出任意嵌套值为 PHP 字面量"""
    parts: list[str] = []
    _export(value, 1, parts)
    return "".join(parts)


def _export(value: Any, level: int, out: list[str]) -> None:
    if isinstance(value, VendorPath):
        out.append(_export_vendor_path(value))
    elif isinstance(value, dict):
        _export_array(list(value.items()), level, out)
    elif isinstance(value, (list, tuple)):
        _export_array(list(enumerate(value)), level, out)
    else:
        out.append(export_scalar(value))


def _export_array(items: list[tuple[Any, Any]], level: int, out: list[str]) -> None:
    if level > 1:
        out.append("\n" + " " * (level - 1))
    out.append("array (\n")
    for key, item in items:
        out.append(" " * (level + 1))
        out.append(export_key(key))
        out.append(" => ")
        _export(item, level + 2, out)
        out.append(",\n")
    if level > 1:
        out.append(" " * (level - 1))
    out.append(")")


def export_key(key: Any) -> str:
    """PHP 数组键：整数（含十进制整数字符串）不加引号，其余导出为字符串"""
    if isinstance(key, int) and not isinstance(key, bool):
        return str(key)
    text = str(key)
    if _INT_KEY_RE.match(text):
        return text
    return quote(text)


def _export_vendor_path(path: VendorPath) -> str:
    if not path.relative:
        return "$vendorDir"
    return f"$vendorDir . {quote(path.relative)}"


def export_scalar(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = repr(value)
        return text if any(c in text for c in ".eEn") else text + ".0"
    return quote(str(value))
