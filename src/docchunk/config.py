"""Configuration system for docchunk.

Manages chunking configuration via a TOML file (``docchunk.toml``) with
typed dataclasses and sensible defaults for all values.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

import tomli_w

if sys.version_info >= (3, 12):
    import tomllib
else:
    import tomli as tomllib

from docchunk.chunk.tree import (
    DEFAULT_EXCLUDED_CLASSES,
    DEFAULT_EXCLUDED_TAGS,
    DEFAULT_SECTION_BREAK_TAGS,
    ExclusionPolicy,
)
from docchunk.exceptions import ConfigError
from docchunk.types import ChunkerConfig

if TYPE_CHECKING:
    from pathlib import Path

_T = TypeVar("_T")

__all__ = [
    "CONFIG_FILE",
    "ChunkConfig",
    "DocchunkConfig",
    "FetchConfig",
    "HtmlConfig",
    "default_config",
    "load_config",
    "save_config",
]

logger = logging.getLogger(__name__)

CONFIG_FILE = "docchunk.toml"


@dataclass
class ChunkConfig:
    """[chunk] section."""

    max_words: int = 200
    granularity: str = "paragraph"


@dataclass
class HtmlConfig:
    """[html] section."""

    greedy_sibling_merge: bool = True
    exclude_tags: list[str] = field(default_factory=lambda: sorted(DEFAULT_EXCLUDED_TAGS))
    exclude_classes: list[str] = field(default_factory=lambda: sorted(DEFAULT_EXCLUDED_CLASSES))
    section_break_tags: list[str] = field(
        default_factory=lambda: sorted(DEFAULT_SECTION_BREAK_TAGS)
    )


@dataclass
class FetchConfig:
    """[fetch] section."""

    timeout: int = 30


@dataclass
class DocchunkConfig:
    """Root configuration combining all sections."""

    chunk: ChunkConfig = field(default_factory=ChunkConfig)
    html: HtmlConfig = field(default_factory=HtmlConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)

    def chunker_config(self) -> ChunkerConfig:
        """Build the validated chunker settings.

        Raises:
            ConfigError: If the word budget or granularity is invalid.
        """
        return ChunkerConfig(
            max_words_per_chunk=self.chunk.max_words,
            granularity=self.chunk.granularity,
        )

    def exclusion_policy(self) -> ExclusionPolicy:
        """Build the HTML exclusion predicate.

        Raises:
            ConfigError: If the tag or class settings are not lists of strings.
        """
        return ExclusionPolicy(
            tags=frozenset(_string_list("html.exclude_tags", self.html.exclude_tags)),
            classes=frozenset(_string_list("html.exclude_classes", self.html.exclude_classes)),
        )

    def section_break_tags(self) -> frozenset[str]:
        """Return the configured section-break tags.

        Raises:
            ConfigError: If the setting is not a list of strings.
        """
        return frozenset(_string_list("html.section_break_tags", self.html.section_break_tags))


def _string_list(key: str, value: object) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings, got {value!r}")
    return value


def default_config() -> DocchunkConfig:
    """Return a config with all default values."""
    return DocchunkConfig()


def _config_to_dict(config: DocchunkConfig) -> dict[str, object]:
    """Convert DocchunkConfig to a nested dict suitable for TOML serialization."""
    return {name: dict(vars(getattr(config, name))) for name in ("chunk", "html", "fetch")}


def save_config(config: DocchunkConfig, path: Path) -> None:
    """Save configuration to a TOML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = _config_to_dict(config)
    try:
        with path.open("wb") as f:
            tomli_w.dump(data, f)
        logger.info("Saved config to %s", path)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise ConfigError(f"Failed to save config to {path}: {e}") from e


# Expected TOML value type per key; bool is not accepted where int is expected
_FIELD_TYPES: dict[str, dict[str, type]] = {
    "chunk": {"max_words": int, "granularity": str},
    "html": {
        "greedy_sibling_merge": bool,
        "exclude_tags": list,
        "exclude_classes": list,
        "section_break_tags": list,
    },
    "fetch": {"timeout": int},
}


def _check_value(section: str, key: str, value: object) -> None:
    expected = _FIELD_TYPES[section][key]
    full_key = f"{section}.{key}"
    if expected is list:
        _string_list(full_key, value)
    elif not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigError(f"{full_key} must be of type {expected.__name__}, got {value!r}")


def _load_section(cls: type[_T], name: str, data: dict[str, object]) -> _T:
    """Load a dataclass section from a dict, ignoring unknown keys.

    Raises:
        ConfigError: If a known key holds a value of the wrong type.
    """
    known_fields = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
    filtered = {k: v for k, v in data.items() if k in known_fields}
    for key, value in filtered.items():
        _check_value(name, key, value)
    return cls(**filtered)


def load_config(path: Path) -> DocchunkConfig:
    """Load configuration from a TOML file.

    Missing sections or keys get default values.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_bytes()
        data = tomllib.loads(raw.decode("utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    config = DocchunkConfig()
    section_map: dict[str, type] = {
        "chunk": ChunkConfig,
        "html": HtmlConfig,
        "fetch": FetchConfig,
    }

    for name, cls in section_map.items():
        section = data.get(name)
        if section is None:
            continue
        if not isinstance(section, dict):
            raise ConfigError(f"[{name}] in {path} must be a table")
        setattr(config, name, _load_section(cls, name, section))

    logger.info("Loaded config from %s", path)
    return config
