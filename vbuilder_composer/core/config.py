"""集中配置管理

插件行为参数统一在此定义，支持从项目目录下的 vbuilder.yml 加载 + 编程式覆盖。
vendor 目录未配置时，按 Composer 的规则从 composer.json 的 config.vendor-dir 读取。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from vbuilder_composer.core.exceptions import ConfigError
from vbuilder_composer.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "vbuilder.yml"


@dataclass
class Config:
    """插件全局配置"""

    # 目录
    project_dir: str = "."
    vendor_dir: str = ""  # 为空时取 composer.json 的 config.vendor-dir，再退回 "vendor"

    # 生成物
    bootstrap_file: str = "composer/vbuilder_bootstrap.php"  # 相对 vendor 目录
    config_file_name: str = "config.neon"

    # composer.json extra 中的命名空间
    extra_namespace: str = "vbuilder"

    # 伪 autoload 文件是否标记为 assume-unchanged
    mark_assume_unchanged: bool = True

    # 日志
    log_level: str = "INFO"
    log_json: bool = False

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k.replace("-", "_"): v for k, v in data.items()
                   if k.replace("-", "_") in known}
        extra = {k: v for k, v in data.items() if k.replace("-", "_") not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        cfg.extra = extra
        return cfg


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str | Path = DEFAULT_CONFIG_FILE, **overrides: object) -> Config:
    """从文件初始化全局配置，关键字参数覆盖文件中的值"""
    global _current  # noqa: PLW0603
    cfg = Config.from_file(path)
    for key, value in overrides.items():
        if not hasattr(cfg, key):
            raise ConfigError(f"未知配置项: {key}")
        setattr(cfg, key, value)
    _current = cfg
    logger.debug("配置已加载: %s", path)
    return _current


def set_config(cfg: Config | None) -> None:
    """直接替换全局配置（None 表示恢复默认，用于测试）"""
    global _current  # noqa: PLW0603
    _current = cfg
