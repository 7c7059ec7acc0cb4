from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field, ValidationError
import tomllib

from .errors import ConfigParseError
from .files import read_text

DEFAULT_CONFIG_PATH = Path("slim.toml")


class PathsConfig(BaseModel):
    manifest: str = ".stylelintignore"
    lint_config: str = ".stylelintrc.json"


class ManifestConfig(BaseModel):
    file_suffix: str = ".css"
    directory_glob: str = "**/*.css"


class EngineConfig(BaseModel):
    command: List[str] = Field(default_factory=lambda: ["npx", "stylelint"])


class SuppressionConfig(BaseModel):
    style: Literal["block", "next-line"] = "block"


class SlimConfig(BaseModel):
    paths: PathsConfig = Field(default_factory=PathsConfig)
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    suppression: SuppressionConfig = Field(default_factory=SuppressionConfig)


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> SlimConfig:
    """Load configuration from TOML file, falling back to defaults when it is absent."""
    fpath = Path(path)
    if not fpath.exists():
        return SlimConfig()
    try:
        data = tomllib.loads(fpath.read_text(encoding="utf-8"))
        return SlimConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as exc:
        raise ConfigParseError(f"Invalid SLIM config ({exc})", fpath) from exc


def load_lint_config(path: str | Path) -> Dict[str, Any]:
    """Read the stylelint config object that is handed verbatim to the engine."""
    content = read_text(path)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(f"Error reading stylelint config file ({exc})", path) from exc
    if not isinstance(data, dict):
        raise ConfigParseError("Stylelint config must be a JSON object", path)
    return data
