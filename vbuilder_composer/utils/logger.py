"""vbuilder-composer 日志配置

插件输出的进度行（"生成 ..."、"跳过 ..."）统一走 logging，
由 CLI 入口决定输出格式：人类可读文本，或供 CI 消费的 JSON。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

# 插件所有模块的 logger 都挂在此名称下
PACKAGE_LOGGER = "vbuilder_composer"

_HUMAN_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器

    输出格式:
        {
            "timestamp": "2024-01-01T12:00:00+00:00",
            "level": "INFO",
            "logger": "vbuilder_composer.core.bootstrap",
            "message": "生成 vendor/composer/vbuilder_bootstrap.php",
            "exception": "traceback..." (仅在有异常时)
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> logging.Logger:
    """配置插件日志器（不触碰宿主进程的根日志器）

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR）
        json_output: 为 True 时使用 JSON 格式，否则使用人类可读格式

    返回:
        logging.Logger: 已配置的插件日志器

    说明:
        - 输出到 stderr
        - 重复调用会先清理旧 handler，避免日志重复输出
        - 关闭向根日志器传播，宿主自己的日志配置不受影响
    """
    log = logging.getLogger(PACKAGE_LOGGER)
    reset_logging()

    log.setLevel(getattr(logging, level.upper(), logging.INFO))
    log.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_HUMAN_FORMAT))
    log.addHandler(handler)
    return log


def reset_logging() -> None:
    """移除插件日志器上的全部 handler，恢复向根日志器传播

    常用于测试环境（配合 caplog）或重新配置日志。
    """
    log = logging.getLogger(PACKAGE_LOGGER)
    for handler in log.handlers[:]:
        log.removeHandler(handler)
        handler.close()
    log.setLevel(logging.NOTSET)
    log.propagate = True
