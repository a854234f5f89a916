"""Engine configuration loaded from YAML."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .errors import ConfigError

__all__ = ["CONFIG_SECTION", "EngineConfig", "load_config"]

CONFIG_SECTION = "patchengine"
MAX_CONTEXT_LINES = 10


@dataclass(slots=True)
class EngineConfig:
    """Tunables shared by the generator, applier and lifecycle manager."""

    context_lines: int = 3
    preview_lines: int = 3
    preview_width: int = 120
    telemetry: bool = True
    languages: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.context_lines = max(0, min(MAX_CONTEXT_LINES, self.context_lines))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EngineConfig":
        """Build a config from a parsed mapping, ignoring unknown keys."""
        section = data.get(CONFIG_SECTION, data)
        if section is None:
            return cls()
        if not isinstance(section, Mapping):
            raise ConfigError(f"'{CONFIG_SECTION}' section must be a mapping")

        values: dict[str, Any] = {}
        for key in ("context_lines", "preview_lines", "preview_width"):
            if key not in section:
                continue
            value = section[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{key} must be a non-negative integer", details={key: value})
            values[key] = value

        if "telemetry" in section:
            value = section["telemetry"]
            if not isinstance(value, bool):
                raise ConfigError("telemetry must be a boolean", details={"telemetry": value})
            values["telemetry"] = value

        languages = section.get("languages")
        if languages is not None:
            if not isinstance(languages, Mapping):
                raise ConfigError("languages must map file extensions to language tags")
            values["languages"] = {
                str(ext).lstrip(".").lower(): str(tag) for ext, tag in languages.items()
            }
        return cls(**values)


def load_config(path: Path | str | None) -> EngineConfig:
    """Load engine settings from a YAML file, falling back to defaults."""
    if path is None:
        return EngineConfig()
    config_path = Path(path)
    if not config_path.exists():
        return EngineConfig()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config: {error}", details={"path": str(config_path)}) from error

    if not isinstance(data, Mapping):
        raise ConfigError(
            "Configuration must be a mapping at the top level.",
            details={"path": str(config_path)},
        )
    return EngineConfig.from_mapping(data)
