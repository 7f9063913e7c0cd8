"""核心数据模型

宿主提供的包实体（只读）与一次聚合运行产生的中间结果。
所有聚合结果在每次运行时重新构建，不跨运行持久化。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# =========================================================================
# 包实体
# =========================================================================


@dataclass
class Package:
    """已安装的依赖包

    相等性按字段比较（同类型 + 同名 + 同版本 + 同 extra），
    收集器以此去重。
    """

    name: str
    version: str = ""
    extra: Any = field(default_factory=dict)  # 原始 extra 块，形状不作保证
    install_path: str = ""  # installed.json 中的 install-path（相对 vendor/composer）


@dataclass
class RootPackage(Package):
    """根项目包，安装路径即项目根目录"""


@dataclass
class AliasPackage(Package):
    """别名包（如 branch-alias），使用前必须解析到 alias_of 指向的实体包"""

    alias_of: Package | None = None


# =========================================================================
# 聚合结果
# =========================================================================


@dataclass
class FakeAutoloadRequest:
    """某个包声明的伪 autoload 文件（路径相对包安装目录）"""

    package: Package
    target_path: str


@dataclass
class AggregationResult:
    """元数据聚合结果

    parameters:
        {"pkg": {vendor: {project: {"dir": path}}, single: {"dir": path}}}
        pkg 下的顶层键已排序，子映射保持插入顺序
    config_files:
        各包根目录下 config.neon 的绝对路径，按包遍历顺序
    extensions:
        扩展名 -> 类名，后出现的包覆盖先出现的
    fake_autoload_requests:
        按包遍历顺序排列的伪 autoload 文件请求
    """

    parameters: dict[str, Any] = field(default_factory=lambda: {"pkg": {}})
    config_files: list[str] = field(default_factory=list)
    extensions: dict[str | int, str] = field(default_factory=dict)
    fake_autoload_requests: list[FakeAutoloadRequest] = field(default_factory=list)
