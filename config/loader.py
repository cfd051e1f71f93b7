"""Configuration file loader and validator.

Handles reading, formatting, and validating settings from the INI configuration file.
Raises exceptions for any issues encountered during loading.
"""

from __future__ import annotations

import ast
import configparser
import logging
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from core.language.validator import LanguageValidator
from models.config_models import Config
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from collections.abc import Callable
    from dataclasses import Field as DataclassField

    from models.config_models import ProviderSettings
    from models.language_models import LanguageValidation
else:
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "Config",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ALLOWED_TRANSLATION_ENGINES: list[str] = ["libretranslate", "nllb", "opus_mt", "m2m100", "deepl"]

RATIO_SETTINGS: list[tuple[str, str]] = [
    ("TRANSLATION", "QUALITY_THRESHOLD"),
    ("METRICS", "MAX_ERROR_RATE"),
    ("METRICS", "MAX_PROVIDER_ERROR_RATE"),
    ("METRICS", "MIN_CACHE_HIT_RATE"),
]

POSITIVE_SETTINGS: list[tuple[str, str]] = [
    ("TRANSLATION", "BATCH_CONCURRENCY"),
    ("TRANSLATION", "BUNDLE_CHUNK_SIZE"),
    ("CACHE", "TTL_DAYS"),
    ("CACHE", "MAX_MEMORY_ENTRIES"),
    ("METRICS", "CAPACITY"),
    ("METRICS", "MAX_AVERAGE_LATENCY_MS"),
]


class ConfigLoaderError(Exception):
    """An error occurred while processing the configuration file."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The specified configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is not formatted correctly."""


class ConfigValueError(ConfigFormatError):
    """The configuration file contains an invalid value."""


class ConfigTypeError(ConfigFormatError):
    """The configuration file contains an invalid type."""


class ConfigLoader:
    """Handles loading and validation of configuration settings.

    Keys missing from the file keep the defaults of ``models.config_models``. String values
    must be quoted Python literals (``URL = "http://localhost:5000"``), lists are written as
    Python lists (``ENGINE = ["nllb", "opus_mt"]``).

    Args:
        config_filename (str): INI file name to load.
        script_name (str): Executing script name, used in error messaging.
        debug (bool): Force ``GENERAL.DEBUG`` on.

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(
        self,
        *,
        config_filename: str,
        script_name: str,
        **args,
    ) -> None:
        config_path = Path(config_filename)
        msg: str
        if not config_path.exists():
            msg = (
                f"Configuration file '{config_filename}' not found. "
                f"Please create '{config_filename}' in the same directory as '{script_name}'."
            )
            raise ConfigFileNotFoundError(msg)

        parser: ConfigParser = ConfigParser()

        try:
            parser.read(config_filename, encoding="utf-8")
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{config_filename}': {err}"
            raise ConfigFormatError(msg) from None

        self.config = Config()
        self._convert_settings(parser)
        self.config.GENERAL.SCRIPT_NAME = script_name
        if args.get("debug", False):
            self.config.GENERAL.DEBUG = True
        self._validate_settings()

    def _convert_settings(self, parser: ConfigParser) -> None:
        """Convert every known section of the parser into the Config object.

        Raises:
            ConfigFormatError: If a value cannot be parsed or coerced to the expected type.
        """
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Section '%s' not defined; using defaults", section.name)
                continue
            self._convert_section_field(parser, formatter, section)

        known: set[str] = {section.name for section in fields(self.config)}
        for name in parser.sections():
            if name not in known:
                logger.warning("Unknown configuration section '%s' ignored", name)

    def _convert_section_field(
        self, parser: ConfigParser, formatter: _ConfigFormatter, section: DataclassField[Any]
    ) -> None:
        """Convert all fields in a configuration section.

        Args:
            parser (ConfigParser): Parsed INI data.
            formatter (_ConfigFormatter): Formatter used to coerce string values to typed values.
            section (Field[Any]): Target configuration section dataclass field.

        Raises:
            ConfigFormatError: If a value fails to format correctly.
        """
        for key in fields(getattr(self.config, section.name)):
            if not parser.has_option(section.name, key.name):
                logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                continue

            formatted_value = formatter.apply_format(section, key)
            setattr(getattr(self.config, section.name), key.name, formatted_value)

    def _validate_settings(self) -> None:
        """Validate engine names, ranges, language and log level settings.

        Raises:
            ConfigFormatError: If validation fails for any setting.
        """
        try:
            self._inspect_defined_item("TRANSLATION", "ENGINE", ALLOWED_TRANSLATION_ENGINES)
            for section_name, key_name in RATIO_SETTINGS:
                self._validate_ratio(section_name, key_name)
            for section_name, key_name in POSITIVE_SETTINGS:
                self._validate_positive(section_name, key_name)
            for engine in ALLOWED_TRANSLATION_ENGINES:
                self._validate_provider(engine.upper())
            self._validate_language("TRANSLATION", "DEFAULT_SOURCE_LANGUAGE")
            self._validate_log_level("GENERAL", "LOG_LEVEL")
        except (AttributeError, TypeError) as err:
            msg: str = f"Invalid configuration value: {err}"
            raise ConfigFormatError(msg) from None

    def _inspect_defined_item(self, section_name: str, key_name: str, defined_list: list[str]) -> None:
        """Verify that configuration values match allowed options.

        Logs warnings for unrecognized values but does not raise exceptions. A single string is
        accepted and wrapped into a list.

        Raises:
            ConfigTypeError: If the configured value is neither list nor str.
        """
        value: str | list[str] = getattr(getattr(self.config, section_name), key_name)
        field_name: str = f"{section_name}.{key_name}"

        if isinstance(value, (list, str)):
            values: list[str] = value if isinstance(value, list) else [value]
            for val in values:
                if val not in defined_list:
                    logger.warning("Unknown value '%s' is set for '%s'", val, field_name)
            setattr(getattr(self.config, section_name), key_name, values)
        else:
            msg: str = f"Unsupported type used for '{field_name}': {type(value)}"
            raise ConfigTypeError(msg)

    def _validate_ratio(self, section_name: str, key_name: str) -> None:
        """Raises ConfigValueError unless the value lies in [0, 1]."""
        value: float = getattr(getattr(self.config, section_name), key_name)
        if not 0.0 <= value <= 1.0:
            msg: str = f"'{section_name}.{key_name}' must be between 0 and 1: {value}"
            raise ConfigValueError(msg)

    def _validate_positive(self, section_name: str, key_name: str) -> None:
        """Raises ConfigValueError unless the value is greater than zero."""
        value: float = getattr(getattr(self.config, section_name), key_name)
        if value <= 0:
            msg: str = f"'{section_name}.{key_name}' must be greater than 0: {value}"
            raise ConfigValueError(msg)

    def _validate_provider(self, section_name: str) -> None:
        settings: ProviderSettings = getattr(self.config, section_name)
        if settings.TIMEOUT <= 0:
            msg: str = f"'{section_name}.TIMEOUT' must be greater than 0: {settings.TIMEOUT}"
            raise ConfigValueError(msg)
        if settings.BATCH_SIZE < 1:
            msg = f"'{section_name}.BATCH_SIZE' must be at least 1: {settings.BATCH_SIZE}"
            raise ConfigValueError(msg)
        if not isinstance(settings.URL, str):
            msg = f"Unsupported type used for '{section_name}.URL': {type(settings.URL)}"
            raise ConfigTypeError(msg)

    def _validate_language(self, section_name: str, key_name: str) -> None:
        """Normalise a language code in place.

        Raises:
            ConfigValueError: If the code is not a known language.
        """
        value: str = getattr(getattr(self.config, section_name), key_name)
        validation: LanguageValidation = LanguageValidator.validate(value)
        if not validation.valid or validation.normalized_code is None:
            msg: str = f"Invalid language for '{section_name}.{key_name}': {validation.error}"
            raise ConfigValueError(msg)
        setattr(getattr(self.config, section_name), key_name, validation.normalized_code)

    def _validate_log_level(self, section_name: str, key_name: str) -> None:
        value: str = getattr(getattr(self.config, section_name), key_name)
        if value.upper() not in logging.getLevelNamesMapping():
            msg: str = f"Unsupported logging level used for '{section_name}.{key_name}': {value}"
            raise ConfigValueError(msg)
        setattr(getattr(self.config, section_name), key_name, value.upper())


class _ConfigFormatter:
    """Converts INI string values to typed Python objects (bool, int, float, str, list)."""

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Convert INI value to the expected Python type based on the Config field type.

        Args:
            section (DataclassField[Any]): Configuration section field containing the key.
            key (DataclassField[Any]): Target field within the section.

        Returns:
            Any: Parsed value coerced to the type declared in the config dataclass.

        Raises:
            ConfigValueError: If a value cannot be coerced to the expected type.
            ConfigFormatError: If literal evaluation fails due to invalid syntax.
            ConfigTypeError: If an unexpected type is encountered during coercion.
        """
        formatters: dict[
            type[bool | int | float], Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float]
        ] = {
            bool: self.parse_as_boolean,
            int: self.parse_as_integer,
            float: self.parse_as_float,
        }

        formatter: Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float] | None = formatters.get(
            type(getattr(getattr(self.config, section.name), key.name))
        )
        if formatter:
            try:
                return formatter(section, key)
            except ValueError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigValueError(msg) from err
            except TypeError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigTypeError(msg) from err

        value_str: str = self.parser[section.name][key.name]
        try:
            return ast.literal_eval(value_str)
        except ValueError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigValueError(msg) from err
        except SyntaxError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigFormatError(msg) from err

    def parse_as_float(self, section: DataclassField[Any], key: DataclassField[Any]) -> float:
        """Convert INI string to float."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"', "%"):
            value = value.removeprefix(char).removesuffix(char)
        return float(value)

    def parse_as_integer(self, section: DataclassField[Any], key: DataclassField[Any]) -> int:
        """Convert INI string to integer."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"', "%"):
            value = value.removeprefix(char).removesuffix(char)
        return int(float(value))

    def parse_as_boolean(self, section: DataclassField[Any], key: DataclassField[Any]) -> bool:
        """Convert INI string to boolean."""
        return self.parser.getboolean(section.name, key.name)
