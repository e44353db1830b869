"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.

Tag vocabularies and the contract multiplier table are immutable
snapshots: components receive them as arguments rather than reading
shared state, and editing helpers return new instances.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .enums import StorageBackend, TagCategory, TimestampFallback
from .errors import ConfigError


# ---------------------------------------------------------------------------
# Tag vocabularies
# ---------------------------------------------------------------------------

class TagConfig(BaseModel):
    """User-editable tag vocabularies offered when annotating trades."""

    model_config = {"frozen": True}

    setups: list[str] = Field(
        default_factory=lambda: ["Trend Follow", "Breakout", "Reversal", "Scalp"]
    )
    mistakes: list[str] = Field(
        default_factory=lambda: ["FOMO", "Chasing", "Hesitation", "Revenge", "No Plan"]
    )
    successes: list[str] = Field(
        default_factory=lambda: ["Patience", "Good Risk Mgmt", "Clean Entry", "Let Runners Run"]
    )
    mindsets: list[str] = Field(
        default_factory=lambda: ["Flow", "Focused", "Anxious", "Bored", "Tilted", "Tired"]
    )

    def with_item(self, category: str, value: str) -> TagConfig:
        """Return a copy with *value* appended to *category*."""
        key = _vocabulary_key(category)
        value = value.strip()
        items = getattr(self, key)
        if not value or value in items:
            return self
        return self.model_copy(update={key: [*items, value]})

    def without_item(self, category: str, value: str) -> TagConfig:
        """Return a copy with *value* removed from *category*."""
        key = _vocabulary_key(category)
        items = getattr(self, key)
        return self.model_copy(update={key: [i for i in items if i != value]})


def _vocabulary_key(category: str) -> str:
    valid = {"setups", *(c.value for c in TagCategory)}
    if category not in valid:
        raise ConfigError(f"Unknown tag vocabulary: {category!r}")
    return category


# ---------------------------------------------------------------------------
# Contract multipliers
# ---------------------------------------------------------------------------

class MultiplierRule(BaseModel):
    """Dollars-per-point multiplier for symbols matching *pattern*.

    Substring rules match anywhere in the upper-cased symbol; exact
    rules require the whole symbol to equal the pattern.
    """

    model_config = {"frozen": True}

    pattern: str
    multiplier: Decimal
    exact: bool = False

    def matches(self, symbol: str) -> bool:
        if self.exact:
            return symbol == self.pattern.upper()
        return self.pattern.upper() in symbol


def _default_multiplier_rules() -> list[MultiplierRule]:
    # Later matches override earlier ones (MNQ contains NQ).
    return [
        MultiplierRule(pattern="NQ", multiplier=Decimal("50")),
        MultiplierRule(pattern="ES", multiplier=Decimal("50")),
        MultiplierRule(pattern="MNQ", multiplier=Decimal("5")),
        MultiplierRule(pattern="MES", multiplier=Decimal("5")),
        MultiplierRule(pattern="CL", multiplier=Decimal("1000")),
        *(
            MultiplierRule(pattern=sym, multiplier=Decimal("1"), exact=True)
            for sym in ("AAPL", "TSLA", "AMD", "NVDA", "SPY", "QQQ")
        ),
    ]


class MultiplierConfig(BaseModel):
    model_config = {"frozen": True}

    rules: list[MultiplierRule] = Field(default_factory=_default_multiplier_rules)
    default: Decimal = Decimal("1")

    def multiplier_for(self, symbol: str) -> Decimal:
        """Resolve the contract multiplier for *symbol* (case-insensitive)."""
        sym = symbol.upper()
        result = self.default
        for rule in self.rules:
            if rule.matches(sym):
                result = rule.multiplier
        return result


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ImportConfig(BaseModel):
    timestamp_fallback: TimestampFallback = TimestampFallback.USE_PROCESSING_INSTANT
    merge_note_separator: str = "\n---\n"


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


class StorageConfig(BaseModel):
    backend: StorageBackend = StorageBackend.SQLITE
    database_url: str = "sqlite:///edgelog.db"
    snapshot_path: str = "edgelog.json"
    owner_id: str = "local"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    tags: TagConfig = Field(default_factory=TagConfig)
    multipliers: MultiplierConfig = Field(default_factory=MultiplierConfig)
    ingest: ImportConfig = Field(default_factory=ImportConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    model_config = {"env_prefix": "EDGELOG_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                try:
                    data = tomli.load(f)
                except tomli.TOMLDecodeError as exc:
                    raise ConfigError(f"Invalid config file {path}: {exc}") from exc

    if overrides:
        data.update(overrides)

    return Settings(**data)
