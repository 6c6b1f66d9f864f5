from __future__ import annotations

import importlib
import logging
from pathlib import Path

import pytest

from localpdf.core.config import DEFAULT_JPEG_QUALITY, EngineSettings


def test_defaults_from_empty_environment() -> None:
    settings = EngineSettings.from_env({})
    assert settings.backend == "auto"
    assert settings.qpdf_executable is None
    assert settings.work_dir is None
    assert settings.jpeg_quality == DEFAULT_JPEG_QUALITY
    assert settings.log_level is None


def test_values_from_environment() -> None:
    settings = EngineSettings.from_env(
        {
            "LOCALPDF_BACKEND": "QPDF",
            "LOCALPDF_QPDF": "/usr/local/bin/qpdf",
            "LOCALPDF_WORKDIR": "/tmp/localpdf",
            "LOCALPDF_JPEG_QUALITY": "70",
            "LOCALPDF_LOG_LEVEL": "debug",
        }
    )
    assert settings.backend == "qpdf"
    assert settings.qpdf_executable == "/usr/local/bin/qpdf"
    assert settings.work_dir == Path("/tmp/localpdf")
    assert settings.jpeg_quality == 70
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "environ",
    [
        {"LOCALPDF_BACKEND": "ghostscript"},
        {"LOCALPDF_JPEG_QUALITY": "high"},
        {"LOCALPDF_JPEG_QUALITY": "0"},
        {"LOCALPDF_JPEG_QUALITY": "101"},
        {"LOCALPDF_LOG_LEVEL": "chatty"},
    ],
)
def test_invalid_environment(environ) -> None:
    with pytest.raises(ValueError):
        EngineSettings.from_env(environ)


def test_apply_logging() -> None:
    logger = logging.getLogger("localpdf")
    previous = logger.level
    try:
        EngineSettings(log_level="WARNING").apply_logging()
        assert logger.level == logging.WARNING
    finally:
        logger.setLevel(previous)


@pytest.mark.parametrize(
    "module_name",
    [
        "localpdf.archive.zipstore",
        "localpdf.library.documents",
        "localpdf.library.render",
        "localpdf.rewrite.backends",
    ],
)
def test_module_loggers_emit_debug_when_verbose(module_name: str) -> None:
    module = importlib.import_module(module_name)
    logger = module.LOGGER
    root = logging.getLogger("localpdf")
    previous = root.level
    try:
        root.setLevel(logging.DEBUG)
        assert logger.name.startswith("localpdf.")
        assert logger.handlers
        assert logger.isEnabledFor(logging.DEBUG)
    finally:
        root.setLevel(previous)
