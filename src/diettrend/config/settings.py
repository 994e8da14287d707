"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from diettrend.labels.parser import LabelParserConfig
from diettrend.tracking.ema import DEFAULT_SMOOTHING, KCAL_PER_KG
from diettrend.tracking.trend import DEFAULT_PROJECTION_DAYS, TrendEngine


OUTPUT_FORMATS = ("table", "json")


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".diettrend"


@dataclass
class TrendConfig:
    """Trend engine constants."""

    smoothing: float = DEFAULT_SMOOTHING
    kcal_per_kg: float = KCAL_PER_KG
    projection_days: int = DEFAULT_PROJECTION_DAYS

    def __post_init__(self) -> None:
        if not 0 < self.smoothing <= 1:
            raise ValueError(f"smoothing must be in (0, 1], got {self.smoothing}")
        if self.kcal_per_kg <= 0:
            raise ValueError(f"kcal_per_kg must be positive, got {self.kcal_per_kg}")
        if self.projection_days < 0:
            raise ValueError(
                f"projection_days must not be negative, got {self.projection_days}"
            )

    def engine(self) -> TrendEngine:
        """Build a TrendEngine with these constants."""
        return TrendEngine(
            smoothing=self.smoothing,
            kcal_per_kg=self.kcal_per_kg,
            projection_days=self.projection_days,
        )


@dataclass
class DeficitConfig:
    """Energy deficit and auto-deficit settings."""

    base_deficit: float = 500.0  # kcal/day
    auto_enabled: bool = False
    upper_bound: Optional[float] = None  # kg, deficit starts at or above
    lower_bound: Optional[float] = None  # kg, deficit stops at or below
    in_deficit_mode: bool = False


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table", "json"
    tail_days: int = 21  # trend rows shown by the CLI

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {OUTPUT_FORMATS}, got {self.output_format!r}"
            )


@dataclass
class Settings:
    """Main application settings."""

    trend: TrendConfig = field(default_factory=TrendConfig)
    deficit: DeficitConfig = field(default_factory=DeficitConfig)
    labels: LabelParserConfig = field(default_factory=LabelParserConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.diettrend/config.yaml

        Returns:
            Settings instance

        Raises:
            ValueError: If a configured value is out of range
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse trend config
        if data.get("trend"):
            trend_data = data["trend"]
            settings.trend = TrendConfig(
                smoothing=float(trend_data.get("smoothing", DEFAULT_SMOOTHING)),
                kcal_per_kg=float(trend_data.get("kcal_per_kg", KCAL_PER_KG)),
                projection_days=int(
                    trend_data.get("projection_days", DEFAULT_PROJECTION_DAYS)
                ),
            )

        # Parse deficit config
        if data.get("deficit"):
            def_data = data["deficit"]
            if "base_deficit" in def_data:
                settings.deficit.base_deficit = float(def_data["base_deficit"])
            if "auto_enabled" in def_data:
                settings.deficit.auto_enabled = bool(def_data["auto_enabled"])
            if def_data.get("upper_bound") is not None:
                settings.deficit.upper_bound = float(def_data["upper_bound"])
            if def_data.get("lower_bound") is not None:
                settings.deficit.lower_bound = float(def_data["lower_bound"])
            if "in_deficit_mode" in def_data:
                settings.deficit.in_deficit_mode = bool(def_data["in_deficit_mode"])

        # Parse label parser config
        if data.get("labels"):
            label_data = data["labels"]
            defaults = LabelParserConfig()
            settings.labels = LabelParserConfig(
                year_min=int(label_data.get("year_min", defaults.year_min)),
                year_max=int(label_data.get("year_max", defaults.year_max)),
                max_value=float(label_data.get("max_value", defaults.max_value)),
                kj_per_kcal=float(label_data.get("kj_per_kcal", defaults.kj_per_kcal)),
                fallback_min_values=int(
                    label_data.get("fallback_min_values", defaults.fallback_min_values)
                ),
                standard_order_fallback=bool(
                    label_data.get(
                        "standard_order_fallback", defaults.standard_order_fallback
                    )
                ),
            )

        # Parse defaults
        if data.get("defaults"):
            default_data = data["defaults"]
            settings.defaults = DefaultsConfig(
                output_format=str(default_data.get("output_format", "table")),
                tail_days=int(default_data.get("tail_days", 21)),
            )

        return settings

    def to_dict(self) -> dict:
        """Return settings as a YAML-friendly dict."""
        return {
            "trend": {
                "smoothing": self.trend.smoothing,
                "kcal_per_kg": self.trend.kcal_per_kg,
                "projection_days": self.trend.projection_days,
            },
            "deficit": {
                "base_deficit": self.deficit.base_deficit,
                "auto_enabled": self.deficit.auto_enabled,
                "upper_bound": self.deficit.upper_bound,
                "lower_bound": self.deficit.lower_bound,
                "in_deficit_mode": self.deficit.in_deficit_mode,
            },
            "labels": {
                "year_min": self.labels.year_min,
                "year_max": self.labels.year_max,
                "max_value": self.labels.max_value,
                "kj_per_kcal": self.labels.kj_per_kcal,
                "fallback_min_values": self.labels.fallback_min_values,
                "standard_order_fallback": self.labels.standard_order_fallback,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
                "tail_days": self.defaults.tail_days,
            },
        }

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.diettrend/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
