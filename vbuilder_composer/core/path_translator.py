"""绝对路径 -> 可迁移表达式

启动文件位于 <vendor>/composer/ 下，运行时以 `$vendorDir = __DIR__ . '/..'`
定位 vendor 目录。vendor 目录下的绝对路径都改写为基于 $vendorDir 的表达式，
项目整体搬迁后生成文件仍然有效。
"""

from __future__ import annotations

from typing import Any

from vbuilder_composer.core.php_export import VendorPath, quote

VENDOR_DIR_VAR = "$vendorDir"


def translate(text: str, vendor_dir: str) -> str:
    """文本替换：把已导出代码中的 `'<vendor_dir>/` 字面量前缀改写为 `$vendorDir . '/`

    只匹配导出器产生的带引号字面量，其他文本保持不变。
    """
    vendor_dir = vendor_dir.rstrip("/")
    needle = quote(vendor_dir + "/")[:-1]
    return text.replace(needle, f"{VENDOR_DIR_VAR} . '/")


def relativize(value: Any, vendor_dir: str) -> Any:
    """表达式树改写：把嵌套结构中位于 vendor 目录下的字符串替换为 VendorPath 节点

    只有整个字符串等于 vendor_dir 或以 `vendor_dir/` 开头时才改写，
    不会误伤恰好包含该子串的其他值。
    """
    vendor_dir = vendor_dir.rstrip("/")
    if isinstance(value, str):
        if value == vendor_dir:
            return VendorPath("")
        if value.startswith(vendor_dir + "/"):
            return VendorPath(value[len(vendor_dir):])
        return value
    if isinstance(value, dict):
        return {k: relativize(v, vendor_dir) for k, v in value.items()}
    if isinstance(value, list):
        return [relativize(v, vendor_dir) for v in value]
    return value
