"""logger.py 日志配置单元测试"""

from __future__ import annotations

import json
import logging

from vbuilder_composer.utils.logger import PACKAGE_LOGGER, JSONFormatter, reset_logging, setup_logging


class TestSetupLogging:
    def test_does_not_touch_root(self) -> None:
        root_handlers = list(logging.getLogger().handlers)
        log = setup_logging("DEBUG")
        assert log.name == PACKAGE_LOGGER
        assert log.level == logging.DEBUG
        assert len(log.handlers) == 1
        assert logging.getLogger().handlers == root_handlers

    def test_repeated_setup_no_duplicates(self) -> None:
        setup_logging()
        log = setup_logging(json_output=True)
        assert len(log.handlers) == 1
        assert isinstance(log.handlers[0].formatter, JSONFormatter)

    def test_reset(self) -> None:
        setup_logging()
        reset_logging()
        log = logging.getLogger(PACKAGE_LOGGER)
        assert log.handlers == []
        assert log.propagate


class TestJSONFormatter:
    def test_format(self) -> None:
        record = logging.LogRecord(
            "vbuilder_composer.core.bootstrap", logging.INFO, __file__, 1,
            "生成 %s", ("vendor/composer/vbuilder_bootstrap.php",), None,
        )
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["message"] == "生成 vendor/composer/vbuilder_bootstrap.php"
        assert "exception" not in data
