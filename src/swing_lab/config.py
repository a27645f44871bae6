from __future__ import annotations

import logging
import math
from typing import Protocol

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from swing_lab.domain.errors import SettingsError
from swing_lab.domain.scores import Category
from swing_lab.domain.settings import (
    LEVEL_THRESHOLDS,
    BallPointSettings,
    KineticSettings,
    MotorProfileSettings,
    ScoringSettings,
    SessionSettings,
    resolve_level,
)

logger = logging.getLogger(__name__)


class AppConfig(Protocol):
    def __getitem__(self, key: str) -> object: ...


_DEFAULTS: dict[str, object] = {
    "composite": {
        "weights": {
            "brain": 0.20,
            "body": 0.35,
            "bat": 0.30,
            "ball": 0.15,
        },
    },
    "ball_points": {
        "barrel": 10.0,
        "quality": 6.0,
        "in_play": 3.0,
        "foul": 0.0,
        "miss": -3.0,
        "floor": -3.0,
        "ceiling": 8.0,
    },
    "kinetic": {
        "default_weight_lbs": 165.0,
        "default_height_inches": 68.0,
        "speed_multiplier": 2.5,
        "efficiency_scale": 1.4,
        "ceiling_uplift": 1.25,
        "min_swings": 3,
    },
    "session": {
        "default_level": "high_school",
    },
    "motor_profile": {
        "high": 5,
        "medium": 3,
    },
    "logging": {
        "level": "INFO",
    },
}


def create_config(
    yaml_path: str = "swing_lab.yaml",
    env_prefix: str = "SWINGLAB",
    defaults: dict[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file. A missing file is ignored.
        env_prefix: Prefix for environment variables, e.g. ``SWINGLAB__KINETIC__MIN_SWINGS``.
        defaults: Default configuration values.
    """
    if defaults is None:
        defaults = _DEFAULTS

    return ConfigurationSet(
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    )


def _float(cfg: AppConfig, key: str) -> float:
    try:
        return float(str(cfg[key]))
    except ValueError as e:
        raise SettingsError(f"{key} must be numeric, got {cfg[key]!r}") from e


def _int(cfg: AppConfig, key: str) -> int:
    try:
        return int(str(cfg[key]))
    except ValueError as e:
        raise SettingsError(f"{key} must be an integer, got {cfg[key]!r}") from e


def validate_composite_weights(weights: dict[Category, float]) -> None:
    missing = [c for c in Category if c not in weights]
    if missing:
        raise SettingsError(f"Composite weights missing categories: {', '.join(missing)}")
    if any(w < 0 for w in weights.values()):
        raise SettingsError("Composite weights must be non-negative")
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=1e-6):
        raise SettingsError(f"Composite weights must sum to 1.0, got {total:.4f}")


def validate_ball_points(points: BallPointSettings) -> None:
    tiers = [points.barrel, points.quality, points.in_play, points.foul, points.miss]
    if any(a <= b for a, b in zip(tiers, tiers[1:])):
        raise SettingsError(f"Ball point tiers must be strictly decreasing (barrel > ... > miss), got {tiers}")
    if points.floor >= points.ceiling:
        raise SettingsError(f"Ball score floor {points.floor} must be below ceiling {points.ceiling}")


def load_scoring_settings(cfg: ConfigurationSet | None = None) -> ScoringSettings:
    """Build validated ``ScoringSettings`` from layered configuration.

    Raises:
        SettingsError: when the composite weights do not sum to 1.0, the ball
            point tiers are not strictly decreasing, or a value is not numeric.
    """
    if cfg is None:
        cfg = create_config()

    weights = {category: _float(cfg, f"composite.weights.{category.value}") for category in Category}
    validate_composite_weights(weights)

    ball_points = BallPointSettings(
        barrel=_float(cfg, "ball_points.barrel"),
        quality=_float(cfg, "ball_points.quality"),
        in_play=_float(cfg, "ball_points.in_play"),
        foul=_float(cfg, "ball_points.foul"),
        miss=_float(cfg, "ball_points.miss"),
        floor=_float(cfg, "ball_points.floor"),
        ceiling=_float(cfg, "ball_points.ceiling"),
    )
    validate_ball_points(ball_points)

    kinetic = KineticSettings(
        default_weight_lbs=_float(cfg, "kinetic.default_weight_lbs"),
        default_height_inches=_float(cfg, "kinetic.default_height_inches"),
        speed_multiplier=_float(cfg, "kinetic.speed_multiplier"),
        efficiency_scale=_float(cfg, "kinetic.efficiency_scale"),
        ceiling_uplift=_float(cfg, "kinetic.ceiling_uplift"),
        min_swings=_int(cfg, "kinetic.min_swings"),
    )
    if kinetic.default_weight_lbs <= 0 or kinetic.default_height_inches <= 0:
        raise SettingsError("Default weight and height must be positive")

    raw_level = str(cfg["session.default_level"])
    default_level = resolve_level(raw_level, default="")
    if default_level not in LEVEL_THRESHOLDS:
        logger.warning("Unknown session.default_level %r, using high_school", raw_level)
        default_level = "high_school"

    motor_profile = MotorProfileSettings(
        high_points=_int(cfg, "motor_profile.high"),
        medium_points=_int(cfg, "motor_profile.medium"),
    )
    if motor_profile.medium_points > motor_profile.high_points:
        raise SettingsError("motor_profile.medium must not exceed motor_profile.high")

    return ScoringSettings(
        composite_weights=weights,
        ball_points=ball_points,
        session=SessionSettings(default_level=default_level),
        kinetic=kinetic,
        motor_profile=motor_profile,
    )


def logging_level(cfg: ConfigurationSet | None = None) -> int:
    """Return the numeric level named by ``logging.level``.

    Raises:
        SettingsError: when the name is not a standard logging level.
    """
    if cfg is None:
        cfg = create_config()
    name = str(cfg["logging.level"]).strip().upper()
    level = logging.getLevelNamesMapping().get(name)
    if level is None:
        raise SettingsError(f"logging.level must be a logging level name, got {cfg['logging.level']!r}")
    return level
