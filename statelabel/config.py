"""
Configuration file loader for label runs.

A configuration is a YAML document. Nested mappings are flattened to dotted
keys, so a provider's targets can be written either nested or flat:

    label:
      class: Initial; BooleanStaticField
      BooleanStaticField:
        field: toggle.value
    search:
      depth_limit: 50

    label.class: [Initial, BooleanStaticField]
    label.BooleanStaticField.field: toggle.value

Without a configuration file the defaults apply: no providers, both output
formats, output in the current directory, no search limits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import ConfigurationError


PROVIDERS_KEY = "label.class"
OUTPUT_DIR_KEY = "label.output_dir"
FORMAT_KEY = "label.format"
DEPTH_LIMIT_KEY = "search.depth_limit"
MAX_STATES_KEY = "search.max_states"

OUTPUT_FORMATS = ("text", "dot")

LIST_DELIMITER = ";"


def _flatten(raw: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


@dataclass
class LabelConfig:
    """Flat key/value view of a label configuration."""
    values: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "LabelConfig":
        """Load a configuration from a YAML file."""
        try:
            with open(path, encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed configuration {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Configuration {path} must be a mapping, got {type(raw).__name__}"
            )
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "LabelConfig":
        return cls(values=_flatten(raw))

    def with_overrides(self, **overrides: Any) -> "LabelConfig":
        """
        Return a copy with the given dotted keys replaced.

        Keyword names use '__' for '.', e.g. ``search__depth_limit=10``.
        None values are ignored so unset CLI options keep file values.
        """
        values = dict(self.values)
        for key, value in overrides.items():
            if value is not None:
                values[key.replace("__", ".")] = value
        return LabelConfig(values=values)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def get_list(self, key: str) -> list[str]:
        """
        Return the entries of a list-valued key.

        String values are split on ';'. Entries are trimmed and empty entries
        removed. A missing key gives an empty list.
        """
        value = self.values.get(key)
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            parts = []
            for item in value:
                if item is not None:
                    parts.extend(str(item).split(LIST_DELIMITER))
        else:
            parts = str(value).split(LIST_DELIMITER)
        return [part.strip() for part in parts if part.strip()]

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self.values.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e

    @property
    def provider_names(self) -> list[str]:
        return self.get_list(PROVIDERS_KEY)

    @property
    def output_dir(self) -> Path:
        return Path(self.values.get(OUTPUT_DIR_KEY) or ".")

    @property
    def formats(self) -> list[str]:
        formats = self.get_list(FORMAT_KEY)
        if not formats or formats == ["both"]:
            return list(OUTPUT_FORMATS)
        unknown = [f for f in formats if f not in OUTPUT_FORMATS]
        if unknown:
            raise ConfigurationError(f"Unknown output format(s): {', '.join(unknown)}")
        return formats

    @property
    def depth_limit(self) -> Optional[int]:
        return self.get_int(DEPTH_LIMIT_KEY)

    @property
    def max_states(self) -> Optional[int]:
        return self.get_int(MAX_STATES_KEY)
