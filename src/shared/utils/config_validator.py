"""
Configuration validation utilities.

Typed readers for environment variables. Each reader returns ``default``
when the variable is unset or blank and raises ``ConfigurationError`` with
the variable name when the value cannot be used.
"""

import os
from typing import List, Optional, Sequence

_TRUE_VALUES = ("true", "yes", "on", "1")
_FALSE_VALUES = ("false", "no", "off", "0")


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or invalid."""
    pass


def _read(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _missing(name: str, kind: str = "") -> ConfigurationError:
    label = f"{kind} environment variable" if kind else "environment variable"
    return ConfigurationError(f"Missing required {label}: {name}")


def _check_bounds(name: str, value: float, min_value: Optional[float], max_value: Optional[float]) -> None:
    if min_value is not None and value < min_value:
        raise ConfigurationError(
            f"Value for {name} ({value}) is below minimum allowed value ({min_value})"
        )

    if max_value is not None and value > max_value:
        raise ConfigurationError(
            f"Value for {name} ({value}) exceeds maximum allowed value ({max_value})"
        )


def validate_int_env(name: str, default: Optional[int] = None, min_value: Optional[int] = None,
                     max_value: Optional[int] = None) -> int:
    """
    Read an integer environment variable within optional bounds.

    Raises:
        ConfigurationError: If the value is missing (and no default), not an
            integer, or out of bounds
    """
    raw = _read(name)
    if raw is None:
        if default is None:
            raise _missing(name, "integer")
        return default

    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid integer value for {name}: '{raw}'")

    _check_bounds(name, value, min_value, max_value)
    return value


def validate_float_env(name: str, default: Optional[float] = None, min_value: Optional[float] = None,
                       max_value: Optional[float] = None) -> float:
    """Read a numeric environment variable within optional bounds."""
    raw = _read(name)
    if raw is None:
        if default is None:
            raise _missing(name, "numeric")
        return default

    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid numeric value for {name}: '{raw}'")

    _check_bounds(name, value, min_value, max_value)
    return value


def validate_bool_env(name: str, default: bool = False) -> bool:
    """
    Read a boolean flag.

    Accepts true/false, yes/no, on/off and 1/0 in any case.
    """
    raw = _read(name)
    if raw is None:
        return default

    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid boolean value for {name}: '{raw}'\n"
        f"Expected one of: {', '.join(_TRUE_VALUES + _FALSE_VALUES)}"
    )


def validate_choice_env(name: str, choices: Sequence[str], default: Optional[str] = None,
                        case_sensitive: bool = False) -> str:
    """
    Read a value that must be one of ``choices``.

    Returns:
        The matching entry of ``choices`` (so ``APP_ENV=Production`` yields
        ``"production"``), or ``default`` when unset

    Raises:
        ConfigurationError: If the value is not one of the choices
    """
    raw = _read(name)
    if raw is None:
        if default is None:
            raise _missing(name)
        return default

    for choice in choices:
        if raw == choice or (not case_sensitive and raw.lower() == choice.lower()):
            return choice

    raise ConfigurationError(
        f"Invalid value for {name}: '{raw}'\n"
        f"Allowed values: {', '.join(choices)}"
    )


def validate_list_env(name: str, default: Optional[List[str]] = None, separator: str = ",") -> List[str]:
    """Read a separated list, dropping blank entries (e.g. ``ALLOWED_ORIGINS``)."""
    raw = _read(name)
    if raw is None:
        return list(default or [])

    items = [item.strip() for item in raw.split(separator) if item.strip()]
    if not items:
        raise ConfigurationError(f"Environment variable {name} does not contain any values")
    return items
