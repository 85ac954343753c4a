"""Configuration settings for the BD opportunity scorer."""

import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a config or weighting file cannot be used."""
    pass


# Default tag weightings (1.0 = neutral baseline)
# Values > 1.0 boost the score, values < 1.0 suppress it.
# Per-user tables produced by the feedback process replace this wholesale.
DEFAULT_TAG_WEIGHTINGS = {
    # Training modernization & readiness
    "training modernization": 1.6,
    "readiness automation": 1.6,
    "adaptive training": 1.6,
    "operator training": 1.6,
    "warfighter readiness": 1.6,
    "training simulation": 1.5,
    "LVC training": 1.5,
    "synthetic training": 1.5,

    # Command and control (C2)
    "C2": 1.5,
    "JADC2": 1.5,
    "command and control": 1.5,
    "mission planning": 1.5,
    "mission execution": 1.5,
    "battle management": 1.5,
    "air defense": 1.4,
    "IBCS": 1.5,

    # AI-driven decision systems
    "AI": 1.5,
    "ML": 1.5,
    "AI/ML": 1.5,
    "decision support": 1.5,
    "decision systems": 1.5,
    "autonomy": 1.5,
    "human-machine teaming": 1.5,
    "predictive analytics": 1.4,
    "wargaming": 1.4,
    "simulation": 1.4,

    # Data fabric & edge
    "data fabric": 1.5,
    "edge computing": 1.5,
    "data integration": 1.4,
    "data transformation": 1.4,
    "edge autonomy": 1.5,
    "disconnected ops": 1.4,
    "DDIL": 1.4,

    # Operator interface
    "operator interface": 1.5,
    "HMI": 1.5,
    "human-machine interface": 1.5,
    "dashboard": 1.4,
    "UI/UX": 1.4,
    "visualization": 1.4,
    "front-end": 1.4,
    "operator display": 1.4,
    "mission software": 1.4,

    # Software engineering
    "software": 1.3,
    "web app": 1.3,
    "DevSecOps": 1.3,
    "CI/CD": 1.3,
    "software factory": 1.3,
    "platform engineering": 1.3,
    "analytics": 1.3,

    # Out of scope (suppress heavily)
    "commodity": 0.3,
    "out-of-scope": 0.2,
    "staff-augmentation": 0.3,
    "uniforms": 0.1,
    "apparel": 0.1,
    "clothing": 0.1,
    "boots": 0.1,
    "vehicles": 0.1,
    "fleet": 0.1,
    "janitorial": 0.1,
    "custodial": 0.1,
    "cleaning": 0.1,
    "construction": 0.1,
    "paving": 0.1,
    "furniture": 0.1,
    "office furniture": 0.1,
    "office supplies": 0.1,
}

# Matched as whole words only ("table" must not hit "database table")
COMMODITY_KEYWORDS = [
    "uniform", "apparel", "clothing", "boot", "shoe", "helmet", "gear", "patch", "hat",
    "vehicle", "fleet", "bus", "truck", "fuel", "oil", "gasoline",
    "janitorial", "custodial", "cleaning", "laundry", "maid",
    "paving", "construction", "asphalt", "roofing", "mowing", "landscaping", "groundskeeping",
    "furniture", "chair", "desk", "table", "office supply", "office supplies", "printer", "toner",
    "commodity", "generic laptop", "generic computer", "generic equipment",
    "staff augmentation", "body shop",
]

# Technical phrases blanked out before commodity matching
# ("database table", "vehicle telemetry" are software work, not furniture or fleets)
TECHNICAL_PHRASES = [
    "database table", "data table", "lookup table", "hash table", "routing table",
    "truth table", "table schema",
    "vehicle telemetry", "vehicle tracking", "autonomous vehicle", "unmanned vehicle",
    "fleet management software", "fleet telemetry",
    "data bus", "message bus", "service bus", "event bus", "bus architecture",
    "help desk", "service desk",
    "patch management", "security patch", "software patch",
]

# Matched as substrings (multi-word phrases)
PRIMARY_DOMAIN_KEYWORDS = [
    # Training modernization
    "training modernization", "readiness automation", "adaptive training", "operator training",
    "warfighter readiness", "lvc training", "synthetic training", "training system",
    # C2 modernization
    "command and control", "c2 modernization", "jadc2", "mission planning", "mission execution",
    "battle management", "air defense", "ibcs",
    # AI decision systems
    "ai-driven", "decision support", "decision system", "human-machine teaming",
    "predictive analytics", "wargaming", "simulation", "autonomy",
    # Data fabric
    "data fabric", "edge computing", "data integration", "edge autonomy", "ddil",
    # Operator interface
    "operator interface", "operator display", "hmi", "human-machine interface",
    "dashboard modernization", "mission software", "combat interface",
]


# Bucket thresholds (inclusive lower bounds)
CHASE_THRESHOLD = 80
SHAPE_THRESHOLD = 60
MONITOR_THRESHOLD = 40

# Earlier classification labels still found on stored records
LEGACY_BUCKETS = {
    "HIGH_PRIORITY": "CHASE",
    "WATCH": "SHAPE",
    "INFO_ONLY": "MONITOR",
}

# Daily brief: max items listed per bucket (AVOID is never listed)
DEFAULT_BRIEF_LIMITS = {
    "CHASE": 10,
    "SHAPE": 5,
    "MONITOR": 5,
}


@dataclass
class Settings:
    """Unified settings with YAML override support."""

    # Per-user weighting table exported from the settings store
    weightings_file: str = field(
        default_factory=lambda: os.environ.get("BDSCORE_WEIGHTINGS_FILE", "")
    )

    # Active weighting table (replaced wholesale, never merged)
    tag_weightings: dict = field(default_factory=lambda: dict(DEFAULT_TAG_WEIGHTINGS))

    # Keyword lists for the text signals
    commodity_keywords: list = field(default_factory=lambda: list(COMMODITY_KEYWORDS))
    primary_domain_keywords: list = field(default_factory=lambda: list(PRIMARY_DOMAIN_KEYWORDS))
    technical_phrases: list = field(default_factory=lambda: list(TECHNICAL_PHRASES))

    # Daily brief
    brief_limits: dict = field(default_factory=lambda: dict(DEFAULT_BRIEF_LIMITS))

    def get_weighting(self):
        """Build an immutable weighting table from the current settings."""
        from .models import TagWeighting
        return TagWeighting(self.tag_weightings)


def _read_structured_file(path: Path) -> dict:
    """Read a YAML or JSON file into a dict."""
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def validate_weightings(data: dict) -> dict:
    """
    Coerce a raw weighting mapping to ``{str: float}``.

    Args:
        data: Mapping of tag -> multiplier as read from YAML/JSON

    Returns:
        New dict with string keys and float multipliers

    Raises:
        ConfigError: If a multiplier is not a finite number
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Weightings must be a mapping, got {type(data).__name__}")

    weightings = {}
    for tag, value in data.items():
        if isinstance(value, bool):
            raise ConfigError(f"Multiplier for '{tag}' must be a number, got {value!r}")
        try:
            multiplier = float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"Multiplier for '{tag}' must be a number, got {value!r}")
        if not math.isfinite(multiplier):
            raise ConfigError(f"Multiplier for '{tag}' must be finite")
        weightings[str(tag)] = multiplier
    return weightings


def load_weightings(path: str) -> dict:
    """
    Load a per-user weighting table from YAML or JSON.

    The file holds either a bare ``tag: multiplier`` mapping or the stored
    row shape ``{"tag_weightings": {...}, ...}``.

    Args:
        path: Path to the weighting file

    Returns:
        Validated weighting dict
    """
    data = _read_structured_file(Path(path))
    if "tag_weightings" in data:
        data = data["tag_weightings"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"tag_weightings in {path} must be a mapping")

    weightings = validate_weightings(data)
    logger.info("Loaded %d tag weightings from %s", len(weightings), path)
    return weightings


def load_config(path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML file with environment overrides.

    Priority: environment > config file > defaults

    Args:
        path: Path to YAML config file (optional)

    Returns:
        Settings instance with merged configuration
    """
    settings = Settings()

    if path:
        config_path = Path(path)
        if config_path.exists():
            data = _read_structured_file(config_path)

            for key, value in data.items():
                if key == "tag_weightings":
                    settings.tag_weightings = validate_weightings(value or {})
                elif hasattr(settings, key):
                    setattr(settings, key, value)
                else:
                    logger.warning("Ignoring unknown config key: %s", key)
        else:
            logger.warning("Config file not found: %s", path)

    # Environment overrides (always win)
    if os.environ.get("BDSCORE_WEIGHTINGS_FILE"):
        settings.weightings_file = os.environ["BDSCORE_WEIGHTINGS_FILE"]

    if settings.weightings_file:
        settings.tag_weightings = load_weightings(settings.weightings_file)

    return settings
