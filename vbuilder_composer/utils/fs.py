"""路径工具 — 与 Composer Filesystem 行为一致的路径规范化与相对路径计算

生成文件里的路径必须与宿主（Composer）计算的结果一致，
因此这里不用 os.path.relpath，而是按 Composer 的规则实现。
"""

from __future__ import annotations

import posixpath
import re

_DRIVE_RE = re.compile(r"^([a-zA-Z]:)")


def is_absolute_path(path: str) -> bool:
    return path.startswith("/") or bool(re.match(r"^[a-zA-Z]:[\\/]", path))


def normalize_path(path: str) -> str:
    """规范化路径：反斜杠转为 /，折叠 `.`、`..` 和重复分隔符

    相对路径开头无法再向上折叠的 `..` 会被保留::

        >>> normalize_path("/proj/vendor/../src//a/./b")
        '/proj/src/a/b'
        >>> normalize_path("../a/../../b")
        '../../b'
    """
    path = path.replace("\\", "/")
    prefix = ""
    m = _DRIVE_RE.match(path)
    if m:
        prefix = m.group(1)
        path = path[len(prefix):]

    absolute = ""
    if path.startswith("/"):
        absolute = "/"
        path = path[1:]

    parts: list[str] = []
    up = False
    for chunk in path.split("/"):
        if chunk == ".." and (absolute or up):
            if parts:
                parts.pop()
            up = not (not parts or parts[-1] == "..")
        elif chunk not in (".", ""):
            parts.append(chunk)
            up = chunk != ".."

    return prefix + absolute + "/".join(parts)


def find_shortest_path(from_path: str, to_path: str, directories: bool = False) -> str:
    """计算从 from_path 到 to_path 的最短路径

    参数:
        from_path: 起点（绝对路径）。directories=False 时视为文件，取其所在目录
        to_path: 终点（绝对路径）
        directories: from_path 是否为目录

    返回:
        str: 同目录返回 `./basename`；有公共祖先时返回 `../` 形式的相对路径；
             仅共享根目录 `/` 时返回 to_path 本身

    异常:
        ValueError: 任一路径不是绝对路径
    """
    if not is_absolute_path(from_path) or not is_absolute_path(to_path):
        raise ValueError(
            f"$from ({from_path}) and $to ({to_path}) must be absolute paths."
        )

    from_path = _lower_drive(normalize_path(from_path))
    to_path = _lower_drive(normalize_path(to_path))

    if directories:
        from_path = from_path.rstrip("/") + "/dummy_file"

    if posixpath.dirname(from_path) == posixpath.dirname(to_path):
        return "./" + posixpath.basename(to_path)

    common = to_path
    while (
        not (from_path + "/").startswith(common + "/")
        and common != "/"
        and not re.match(r"^[a-z]:/?$", common, re.IGNORECASE)
    ):
        common = posixpath.dirname(common)

    if not from_path.startswith(common) or common == "/":
        return to_path

    common = common.rstrip("/") + "/"
    depth = from_path[len(common):].count("/")
    result = "../" * depth + to_path[len(common):]
    return result or "./"


def _lower_drive(path: str) -> str:
    return path[:1].lower() + path[1:] if _DRIVE_RE.match(path) else path
