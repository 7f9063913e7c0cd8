"""统一异常体系

所有业务异常继承 VBuilderError，替代散落的 ValueError / RuntimeError。
CLI 层可据此输出友好提示。

元数据格式错误不在此列：它们被容忍并记录警告，不会中断生成。
"""

from __future__ import annotations


class VBuilderError(Exception):
    """插件基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(VBuilderError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class RepositoryError(VBuilderError):
    """composer.json / installed.json 无法读取，或别名链损坏"""

    code = "REPOSITORY_ERROR"


class ExecutionError(VBuilderError):
    """外部命令无法执行"""

    code = "EXECUTION_ERROR"


class VcsError(VBuilderError):
    """版本控制索引更新失败（assume-unchanged）"""

    code = "VCS_ERROR"

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path
