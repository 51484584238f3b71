"""Generator configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from .engine.directionality import DEFAULT_TAB_STOP_TWIPS
from .engine.placeholder_engine import PlaceholderSyntax
from .engine.run_normalizer import MergePolicy
from .exceptions import InvalidArgumentError

DEFAULT_TEMPLATES_DIR = "Templates"
DEFAULT_OUTPUT_DIR = "Generated"
DEFAULT_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


@dataclass(frozen=True)
class GeneratorConfig:
    """Configuration for document generation."""
    templates_dir: Path = field(default_factory=lambda: Path(DEFAULT_TEMPLATES_DIR))
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    placeholder_syntax: PlaceholderSyntax = PlaceholderSyntax.SINGLE
    merge_policy: MergePolicy = MergePolicy.SIGNATURE
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT  # second resolution
    default_tab_stop: int = DEFAULT_TAB_STOP_TWIPS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GeneratorConfig":
        """
        Build a configuration from plain values (e.g. parsed JSON).

        Raises:
            InvalidArgumentError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidArgumentError(f"Unknown configuration keys: {', '.join(unknown)}",
                                       argument="config")
        return cls().with_overrides(**data)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "GeneratorConfig":
        """Load a configuration from a JSON object file."""
        config_path = Path(path)
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise InvalidArgumentError(f"Cannot read configuration '{config_path}': {e}",
                                       argument="config", cause=e) from e
        if not isinstance(data, dict):
            raise InvalidArgumentError(f"Configuration '{config_path}' must be a JSON object",
                                       argument="config")
        return cls.from_dict(data)

    def with_overrides(self, **overrides: Any) -> "GeneratorConfig":
        """Return a copy with the given fields replaced; ``None`` values are ignored."""
        values: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
        try:
            if "templates_dir" in values:
                values["templates_dir"] = Path(values["templates_dir"])
            if "output_dir" in values:
                values["output_dir"] = Path(values["output_dir"])
            if "placeholder_syntax" in values:
                values["placeholder_syntax"] = PlaceholderSyntax(values["placeholder_syntax"])
            if "merge_policy" in values:
                values["merge_policy"] = MergePolicy(values["merge_policy"])
            if "default_tab_stop" in values:
                values["default_tab_stop"] = int(values["default_tab_stop"])
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Invalid configuration value: {e}",
                                       argument="config", cause=e) from e
        return replace(self, **values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "templates_dir": str(self.templates_dir),
            "output_dir": str(self.output_dir),
            "placeholder_syntax": self.placeholder_syntax.value,
            "merge_policy": self.merge_policy.value,
            "timestamp_format": self.timestamp_format,
            "default_tab_stop": self.default_tab_stop,
        }
