"""Reading and querying INI-style configuration files."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

_TRUE_STRICT = ("true", "yes", "on", "1")
_FALSE_STRICT = ("false", "no", "off", "0")
_TRUE_LOOSE = ("YAY", "TRUE", "YES", "ON", "1")
_FALSE_LOOSE = ("NAY", "FALSE", "NO", "OFF", "0")


class ConfigError(RuntimeError):
    """Base class for configuration errors."""


class ItemNotFoundError(ConfigError):
    """A requested key is not present in the configuration."""


class InvalidConversionError(ConfigError):
    """A value could not be converted to the requested type."""


class IllegalIdentifierError(ConfigError):
    """A value is not a recognised boolean identifier."""


def trim(source: str, delims: str = " \t\r\n") -> str:
    """Remove leading and trailing delimiter characters."""
    return source.strip(delims)


def convert(value, target_type=str):
    """Convert a value (typically a string) to ``target_type``."""
    if target_type is str:
        return str(value)
    text = str(value)
    if target_type is bool:
        if text in ("0", "1"):
            return text == "1"
    else:
        try:
            return target_type(text)
        except (TypeError, ValueError):
            pass
    logger.error("Error: conversion of '%s' failed.", text)
    raise InvalidConversionError(f"invalid conversion to {target_type.__name__}.")


class ConfigFile:
    """Key/value configuration read from a file, keyed as ``section/key``."""

    def __init__(self, filename):
        filename = os.fspath(filename)
        self._items: dict[str, str] = {}
        try:
            with open(filename, encoding="utf-8") as handle:
                lines = handle.read().splitlines()
        except OSError as exc:
            logger.error("Could not open config file '%s'.", filename)
            raise ConfigError(f"Error: Could not open config file '{filename}'") from exc

        section = ""
        for lineno, line in enumerate(lines, start=1):
            if not line:
                continue
            cut = min((i for i in (line.find(c) for c in "#;%") if i >= 0), default=-1)
            if cut >= 0:
                line = line[:cut]
            if line.startswith("["):
                close = line.find("]")
                section = trim(line[1:close] if close >= 0 else line[1:])
                continue

            pos_equal = line.find("=")
            if pos_equal < 0:
                name = value = trim(line)
                if name:
                    logger.warning("Ignoring non-assignment in %s:%d", filename, lineno)
                continue
            name = trim(line[:pos_equal])
            value = trim(line[pos_equal + 1:])

            if not name and value:
                logger.warning(
                    "Ignoring assignment missing entry name in %s:%d", filename, lineno
                )
                continue
            if not value and name:
                logger.warning("Empty entry will be ignored in %s:%d", filename, lineno)
                continue
            if not value and not name:
                continue

            key = f"{section}/{name}"
            if key in self._items:
                logger.warning(
                    "Redeclaration overwrites previous value in %s:%d", filename, lineno
                )
            self._items[key] = value

        dot = filename.rfind(".")
        self._items["meta/config_basename"] = filename[:dot] if dot >= 0 else filename

    def insert_value(self, key, value, section=None):
        """Store a value under ``key`` or, if given, ``section/key``."""
        if section is not None:
            key = f"{section}/{key}"
        self._items[key] = value

    def contains_key(self, key, section=None):
        """Return whether ``key`` (or ``section/key``) is present."""
        if section is not None:
            key = f"{section}/{key}"
        return key in self._items

    def _lookup(self, section, key):
        try:
            return self._items[f"{section}/{key}"]
        except KeyError:
            raise ItemNotFoundError(f"'{section}/{key}' not found.") from None

    def get_value(self, section, key, value_type=str):
        """Return the value of ``section/key`` converted to ``value_type``."""
        if value_type is bool:
            return self.get_bool(section, key)
        try:
            raw = self._lookup(section, key)
        except ItemNotFoundError as exc:
            logger.error("%s", exc)
            raise
        return convert(raw, value_type)

    def get_value_safe(self, section, key, default):
        """Return the value of ``section/key``, or ``default`` if it is absent.

        The value is converted to the type of ``default``.
        """
        if isinstance(default, bool):
            return self.get_bool_safe(section, key, default)
        value_type = str if default is None else type(default)
        try:
            raw = self._lookup(section, key)
        except ItemNotFoundError:
            logger.debug(
                "Item '%s/%s' not found in config. Default = '%s'", section, key, default
            )
            return default
        return convert(raw, value_type)

    def get_bool(self, section, key):
        """Interpret ``section/key`` as a boolean (true/yes/on/1, false/no/off/0)."""
        text = self.get_value(section, key, str)
        if text in _TRUE_STRICT:
            return True
        if text in _FALSE_STRICT:
            return False
        message = f"Illegal identifier '{text}' in '{key}'."
        logger.error("%s", message)
        raise IllegalIdentifierError(message)

    def get_bool_safe(self, section, key, default):
        """Interpret ``section/key`` as a boolean, case-insensitively.

        Returns ``default`` if the key is absent or not recognised.
        """
        try:
            text = self._lookup(section, key).upper()
        except ItemNotFoundError:
            return default
        if text in _TRUE_LOOSE:
            return True
        if text in _FALSE_LOOSE:
            return False
        return default

    def get_path_relative_to_config(self, filename):
        """Return ``filename`` prefixed with the configuration file's base name."""
        basename = self.get_value_safe("meta", "config_basename", "")
        return f"{basename}_{filename}"

    def dump(self, out):
        """Write all non-empty key/value pairs to a text stream."""
        for key, value in sorted(self._items.items()):
            if value:
                out.write(f"{key:<24}  =  {value}\n")

    def dump_to_log(self):
        """Log all non-empty key/value pairs at info level."""
        logger.info("List of all configuration options:")
        for key, value in sorted(self._items.items()):
            if value:
                logger.info("%28s = %s", key, value)