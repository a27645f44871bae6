from __future__ import annotations

import io
import logging
import sys
from typing import TYPE_CHECKING

import pytest

from swing_lab._logging import PACKAGE_LOGGER, configure_logging
from swing_lab.config import create_config, logging_level
from swing_lab.domain.errors import SettingsError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

_NO_YAML = "/nonexistent/swing_lab.yaml"


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    package = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(package.handlers)
    level = package.level
    propagate = package.propagate
    yield package
    package.handlers[:] = handlers
    package.setLevel(level)
    package.propagate = propagate


class TestPackageLogger:
    def test_import_installs_null_handler(self) -> None:
        handlers = logging.getLogger(PACKAGE_LOGGER).handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)


class TestLoggingLevel:
    def test_default_is_info(self) -> None:
        assert logging_level(create_config(yaml_path=_NO_YAML)) == logging.INFO

    def test_env_var_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SWINGLAB__LOGGING__LEVEL", "debug")
        assert logging_level(create_config(yaml_path=_NO_YAML)) == logging.DEBUG

    def test_yaml_overrides(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "swing_lab.yaml"
        yaml_file.write_text("logging:\n  level: warning\n")
        assert logging_level(create_config(yaml_path=str(yaml_file))) == logging.WARNING

    def test_unknown_name_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SWINGLAB__LOGGING__LEVEL", "chatty")
        with pytest.raises(SettingsError, match="logging.level"):
            logging_level(create_config(yaml_path=_NO_YAML))


class TestConfigureLogging:
    def test_level_from_config(self, package_logger: logging.Logger) -> None:
        configure_logging(create_config(yaml_path=_NO_YAML))
        assert package_logger.level == logging.INFO

    def test_level_from_env(self, package_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SWINGLAB__LOGGING__LEVEL", "error")
        configure_logging(create_config(yaml_path=_NO_YAML))
        assert package_logger.level == logging.ERROR

    def test_verbose_sets_debug_level(self, package_logger: logging.Logger) -> None:
        configure_logging(create_config(yaml_path=_NO_YAML), verbose=True)
        assert package_logger.level == logging.DEBUG

    def test_handler_writes_to_stderr_by_default(self, package_logger: logging.Logger) -> None:
        configure_logging(create_config(yaml_path=_NO_YAML))
        streams = [h for h in package_logger.handlers if not isinstance(h, logging.NullHandler)]
        assert len(streams) == 1
        assert isinstance(streams[0], logging.StreamHandler)
        assert streams[0].stream is sys.stderr

    def test_idempotent(self, package_logger: logging.Logger) -> None:
        cfg = create_config(yaml_path=_NO_YAML)
        configure_logging(cfg)
        configure_logging(cfg)
        streams = [h for h in package_logger.handlers if not isinstance(h, logging.NullHandler)]
        assert len(streams) == 1
        assert any(isinstance(h, logging.NullHandler) for h in package_logger.handlers)

    def test_module_records_reach_stream(self, package_logger: logging.Logger) -> None:
        out = io.StringIO()
        configure_logging(create_config(yaml_path=_NO_YAML), stream=out)
        logging.getLogger("swing_lab.services.scoring").info("scored %d swings", 4)
        logging.getLogger("swing_lab.services.scoring").debug("hidden")
        text = out.getvalue()
        assert "INFO" in text
        assert "swing_lab.services.scoring" in text
        assert "scored 4 swings" in text
        assert "hidden" not in text

    def test_root_logger_untouched(self, package_logger: logging.Logger) -> None:
        root = logging.getLogger()
        before = list(root.handlers)
        configure_logging(create_config(yaml_path=_NO_YAML))
        assert root.handlers == before
        assert package_logger.propagate is False
