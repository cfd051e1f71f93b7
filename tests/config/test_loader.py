from __future__ import annotations

from textwrap import dedent
from typing import TYPE_CHECKING

import pytest

from config.loader import (
    ConfigFileNotFoundError,
    ConfigFormatError,
    ConfigLoader,
    ConfigTypeError,
    ConfigValueError,
)

if TYPE_CHECKING:
    from pathlib import Path


def _write_ini(tmp_path: Path, content: str) -> Path:
    ini_path: Path = tmp_path / "translator.ini"
    ini_path.write_text(dedent(content), encoding="utf-8")
    return ini_path


def test_config_loader_raises_for_missing_file(tmp_path: Path) -> None:
    ini_path: Path = tmp_path / "missing.ini"
    with pytest.raises(ConfigFileNotFoundError):
        ConfigLoader(config_filename=str(ini_path), script_name="test")


def test_empty_file_keeps_defaults(tmp_path: Path) -> None:
    ini_path: Path = _write_ini(tmp_path, "")

    config = ConfigLoader(config_filename=str(ini_path), script_name="test").config

    assert config.TRANSLATION.ENGINE == ["libretranslate", "nllb", "opus_mt", "m2m100"]
    assert config.TRANSLATION.QUALITY_THRESHOLD == 0.5
    assert config.CACHE.TTL_DAYS == 30
    assert config.LIBRETRANSLATE.PRIORITY == 4
    assert config.LIBRETRANSLATE.BATCH_SIZE == 50
    assert config.NLLB.TIMEOUT == 15.0
    assert config.GENERAL.SCRIPT_NAME == "test"


def test_values_are_coerced_and_debug_override_applied(tmp_path: Path) -> None:
    ini_path: Path = _write_ini(
        tmp_path,
        """
        [GENERAL]
        DEBUG = False
        LOG_LEVEL = "debug"

        [TRANSLATION]
        ENGINE = ["nllb", "deepl"]
        DEFAULT_SOURCE_LANGUAGE = "EN-us"
        QUALITY_THRESHOLD = 0.7
        COALESCE_INFLIGHT = no

        [LIBRETRANSLATE]
        URL = "http://localhost:5000"
        TIMEOUT = 5
        BATCH_SIZE = "25"
        """,
    )

    config = ConfigLoader(config_filename=str(ini_path), script_name="test", debug=True).config

    assert config.GENERAL.DEBUG is True
    assert config.GENERAL.LOG_LEVEL == "DEBUG"
    assert config.TRANSLATION.ENGINE == ["nllb", "deepl"]
    assert config.TRANSLATION.DEFAULT_SOURCE_LANGUAGE == "en"
    assert config.TRANSLATION.QUALITY_THRESHOLD == 0.7
    assert config.TRANSLATION.COALESCE_INFLIGHT is False
    assert config.LIBRETRANSLATE.URL == "http://localhost:5000"
    assert config.LIBRETRANSLATE.TIMEOUT == 5.0
    assert isinstance(config.LIBRETRANSLATE.TIMEOUT, float)
    assert config.LIBRETRANSLATE.BATCH_SIZE == 25


def test_single_engine_string_is_wrapped_in_list(tmp_path: Path) -> None:
    ini_path: Path = _write_ini(
        tmp_path,
        """
        [TRANSLATION]
        ENGINE = "libretranslate"
        """,
    )

    config = ConfigLoader(config_filename=str(ini_path), script_name="test").config

    assert config.TRANSLATION.ENGINE == ["libretranslate"]


def test_unknown_engine_only_warns(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    ini_path: Path = _write_ini(
        tmp_path,
        """
        [TRANSLATION]
        ENGINE = ["google", "nllb"]
        """,
    )

    config = ConfigLoader(config_filename=str(ini_path), script_name="test").config

    assert config.TRANSLATION.ENGINE == ["google", "nllb"]
    assert any("Unknown value 'google'" in rec.message for rec in caplog.records)


def test_invalid_translation_engine_type_raises_type_error(tmp_path: Path) -> None:
    ini_path: Path = _write_ini(
        tmp_path,
        """
        [TRANSLATION]
        ENGINE = 1
        """,
    )

    with pytest.raises(ConfigTypeError):
        ConfigLoader(config_filename=str(ini_path), script_name="test")


def test_invalid_boolean_value_raises_config_value_error(tmp_path: Path) -> None:
    ini_path: Path = _write_ini(
        tmp_path,
        """
        [CACHE]
        ENABLED = maybe
        """,
    )

    with pytest.raises(ConfigValueError):
        ConfigLoader(config_filename=str(ini_path), script_name="test")


def test_unquoted_string_raises_format_error(tmp_path: Path) -> None:
    ini_path: Path = _write_ini(
        tmp_path,
        """
        [LIBRETRANSLATE]
        URL = http://localhost:5000
        """,
    )

    with pytest.raises(ConfigFormatError):
        ConfigLoader(config_filename=str(ini_path), script_name="test")


@pytest.mark.parametrize(
    ("section", "line"),
    [
        ("TRANSLATION", "QUALITY_THRESHOLD = 1.5"),
        ("METRICS", "MAX_ERROR_RATE = -0.1"),
        ("TRANSLATION", "BATCH_CONCURRENCY = 0"),
        ("CACHE", "TTL_DAYS = 0"),
        ("NLLB", "TIMEOUT = 0"),
        ("LIBRETRANSLATE", "BATCH_SIZE = 0"),
        ("TRANSLATION", 'DEFAULT_SOURCE_LANGUAGE = "zz"'),
        ("GENERAL", 'LOG_LEVEL = "LOUD"'),
    ],
)
def test_out_of_range_values_raise_config_value_error(tmp_path: Path, section: str, line: str) -> None:
    ini_path: Path = _write_ini(tmp_path, f"[{section}]\n{line}\n")

    with pytest.raises(ConfigValueError):
        ConfigLoader(config_filename=str(ini_path), script_name="test")


def test_malformed_file_raises_format_error(tmp_path: Path) -> None:
    ini_path: Path = _write_ini(tmp_path, "this is not an ini file\n")

    with pytest.raises(ConfigFormatError):
        ConfigLoader(config_filename=str(ini_path), script_name="test")
