"""Layered configuration for Ghostscript conversions."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .exceptions import ConfigurationError, ConfigurationKeyNotFound

_LOGGER = logging.getLogger("pdf_rasterizer.config")

ConfigValue = Union[int, bool, str]

DEFAULT_CONFIGURATION: Mapping[str, ConfigValue] = MappingProxyType(
    {
        "start_page": 0,
        "batch_size": 0,
        "resolution": 300,
        "compression_quality": 100,
        "alpha_bits": 4,
        "disable_color_management": True,
        "disable_font_embedding": True,
        "disable_annotations": True,
    }
)

# key -> (minimum, maximum); maximum None means unbounded
_INTEGER_BOUNDS: Dict[str, tuple] = {
    "start_page": (0, None),
    "batch_size": (0, None),
    "resolution": (1, None),
    "compression_quality": (0, 100),
    "alpha_bits": (1, 4),
}

_BOOLEAN_KEYS = (
    "disable_color_management",
    "disable_font_embedding",
    "disable_annotations",
)


class ConfigurationResolver:
    """Resolve settings from a user layer laid over immutable defaults."""

    def __init__(
        self,
        user: Optional[Mapping[str, ConfigValue]] = None,
        defaults: Mapping[str, ConfigValue] = DEFAULT_CONFIGURATION,
    ) -> None:
        self._defaults = defaults
        self._user: Dict[str, ConfigValue] = dict(user or {})

        unknown = sorted(set(self._user) - set(self._defaults))
        if unknown:
            _LOGGER.debug("Ignoring unrecognized configuration keys: %s", ", ".join(unknown))

    @property
    def user(self) -> Mapping[str, ConfigValue]:
        return MappingProxyType(self._user)

    @property
    def defaults(self) -> Mapping[str, ConfigValue]:
        return self._defaults

    def resolve(self, key: str) -> ConfigValue:
        """Return the user value for *key*, falling back to the default."""

        if key in self._user:
            return self._user[key]
        if key in self._defaults:
            return self._defaults[key]
        raise ConfigurationKeyNotFound(key)

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self.resolve(key)
        except ConfigurationKeyNotFound:
            return default

    def __contains__(self, key: object) -> bool:
        return key in self._user or key in self._defaults

    def as_dict(self) -> Dict[str, ConfigValue]:
        merged: Dict[str, ConfigValue] = dict(self._defaults)
        merged.update(self._user)
        return merged

    def with_overrides(self, **overrides: ConfigValue) -> "ConfigurationResolver":
        """Return a new resolver with *overrides* merged into the user layer."""

        user = dict(self._user)
        user.update({k: v for k, v in overrides.items() if v is not None})
        return ConfigurationResolver(user, self._defaults)

    def validate(self) -> None:
        """Check that every required setting resolves to a value of the right type and range.

        Raises:
            ConfigurationKeyNotFound: a required key is in neither layer
            ConfigurationError: a value has the wrong type or is out of range
        """

        for key, (minimum, maximum) in _INTEGER_BOUNDS.items():
            value = self.resolve(key)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"Configuration '{key}' must be an integer, got {value!r}."
                )
            if value < minimum or (maximum is not None and value > maximum):
                bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
                raise ConfigurationError(
                    f"Configuration '{key}' must be {bounds}, got {value}."
                )

        for key in _BOOLEAN_KEYS:
            value = self.resolve(key)
            if not isinstance(value, bool):
                raise ConfigurationError(
                    f"Configuration '{key}' must be a boolean, got {value!r}."
                )


__all__ = ["ConfigurationResolver", "DEFAULT_CONFIGURATION", "ConfigValue"]
