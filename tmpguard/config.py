# tmpguard — Predictable Temp Path Guard
# Copyright (C) 2026 tmpguard Project Contributors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""Guard configuration — defaults, optional .tmpguard.yaml overrides.

The scan pipeline receives a GuardConfig explicitly; nothing reads
configuration from global state after load_config() returns.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".tmpguard.yaml"

DEFAULT_RUNTIME_ROOTS = ("src", "extensions")
DEFAULT_SOURCE_EXTENSIONS = (".ts", ".tsx")
DEFAULT_IGNORED_DIR_NAMES = ("node_modules", "dist")


class GuardConfig(BaseModel):
    """Where to look and how to enumerate candidates."""

    runtime_roots: list[str] = Field(default_factory=lambda: list(DEFAULT_RUNTIME_ROOTS))
    source_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS)
    )
    ignored_dir_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORED_DIR_NAMES)
    )
    use_prefilter: bool = True
    ripgrep_binary: str = "rg"
    prefilter_timeout: float = 60.0

    model_config = {"frozen": True}

    @field_validator("source_extensions")
    @classmethod
    def _dotted_extensions(cls, value: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]

    @field_validator("runtime_roots")
    @classmethod
    def _relative_roots(cls, value: list[str]) -> list[str]:
        for root in value:
            if Path(root).is_absolute():
                raise ValueError(f"runtime root must be relative to the repo: {root}")
        return value


def load_config(repo_root: Path, config_path: Optional[Path] = None) -> GuardConfig:
    """Load GuardConfig from .tmpguard.yaml (or config_path).

    A missing default file yields the built-in defaults. An explicit
    config_path must exist. Malformed YAML or invalid values raise ValueError.
    """
    path = config_path if config_path is not None else repo_root / CONFIG_FILENAME
    if not path.exists():
        if config_path is not None:
            raise FileNotFoundError(f"Config file not found: {path}")
        return GuardConfig()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    try:
        config = GuardConfig(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {path}:\n{e}") from e

    logger.debug("Loaded config from %s", path)
    return config
