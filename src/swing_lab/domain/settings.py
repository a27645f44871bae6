from dataclasses import dataclass, field
from enum import StrEnum

from swing_lab.domain.scores import Category, Grade


class Direction(StrEnum):
    HIGHER = "higher"
    LOWER = "lower"


class MetricSource(StrEnum):
    DISCIPLINE = "discipline"
    KINEMATICS = "kinematics"
    ENERGY = "energy"
    LAUNCH_MONITOR = "launch_monitor"
    CONSISTENCY = "consistency"


@dataclass(frozen=True)
class StepBand:
    threshold: float
    score: float


@dataclass(frozen=True)
class SubMetricSpec:
    """A named raw metric scored by a monotone step function.

    For ``Direction.HIGHER`` the bands are checked from the highest threshold
    down and the first band with ``value >= threshold`` wins. For
    ``Direction.LOWER`` they are checked from the lowest threshold up and the
    first band with ``value <= threshold`` wins. Values matching no band get
    ``floor``.
    """

    key: str
    direction: Direction
    bands: tuple[StepBand, ...]
    weight: float
    source: MetricSource
    floor: float = 35.0


@dataclass(frozen=True)
class CategorySpec:
    category: Category
    metrics: tuple[SubMetricSpec, ...]
    fallback: tuple[SubMetricSpec, ...] = ()
    requires: frozenset[MetricSource] = frozenset()


def _bands(*pairs: tuple[float, float]) -> tuple[StepBand, ...]:
    return tuple(StepBand(threshold=t, score=s) for t, s in pairs)


BRAIN_SPEC = CategorySpec(
    category=Category.BRAIN,
    metrics=(
        SubMetricSpec(
            "k_rate", Direction.LOWER, _bands((15, 90), (18, 80), (22, 65), (26, 50)), 0.25, MetricSource.DISCIPLINE
        ),
        SubMetricSpec(
            "walk_rate", Direction.HIGHER, _bands((12, 90), (10, 80), (8, 65), (6, 50)), 0.20, MetricSource.DISCIPLINE
        ),
        SubMetricSpec(
            "chase_rate", Direction.LOWER, _bands((20, 90), (25, 80), (30, 65), (35, 50)), 0.20, MetricSource.DISCIPLINE
        ),
        SubMetricSpec(
            "contact_rate",
            Direction.HIGHER,
            _bands((85, 90), (80, 80), (75, 65), (70, 50)),
            0.15,
            MetricSource.DISCIPLINE,
        ),
        SubMetricSpec(
            "discipline_ratio",
            Direction.HIGHER,
            _bands((0.75, 90), (0.6, 80), (0.45, 65), (0.3, 50)),
            0.20,
            MetricSource.DISCIPLINE,
        ),
    ),
    # Motion consistency stands in when no plate-discipline numbers are supplied.
    fallback=(
        SubMetricSpec(
            "cv_legs_ke", Direction.LOWER, _bands((10, 90), (15, 80), (22, 65), (30, 50)), 0.35, MetricSource.CONSISTENCY
        ),
        SubMetricSpec(
            "cv_torso_ke",
            Direction.LOWER,
            _bands((10, 90), (15, 80), (22, 65), (30, 50)),
            0.35,
            MetricSource.CONSISTENCY,
        ),
        SubMetricSpec(
            "cv_output", Direction.LOWER, _bands((15, 90), (25, 80), (40, 65), (60, 50)), 0.30, MetricSource.CONSISTENCY
        ),
    ),
)

BODY_SPEC = CategorySpec(
    category=Category.BODY,
    metrics=(
        SubMetricSpec(
            "pelvis_velocity",
            Direction.HIGHER,
            _bands((700, 90), (600, 80), (500, 65), (400, 50)),
            0.25,
            MetricSource.KINEMATICS,
        ),
        SubMetricSpec(
            "torso_velocity",
            Direction.HIGHER,
            _bands((950, 90), (850, 80), (750, 65), (600, 50)),
            0.20,
            MetricSource.KINEMATICS,
        ),
        SubMetricSpec(
            "x_factor", Direction.HIGHER, _bands((40, 90), (32, 80), (25, 65), (18, 50)), 0.15, MetricSource.KINEMATICS
        ),
        SubMetricSpec(
            "legs_ke", Direction.HIGHER, _bands((400, 90), (300, 80), (200, 65), (120, 50)), 0.25, MetricSource.ENERGY
        ),
        SubMetricSpec(
            "torso_ke", Direction.HIGHER, _bands((250, 90), (180, 80), (120, 65), (70, 50)), 0.15, MetricSource.ENERGY
        ),
    ),
    requires=frozenset({MetricSource.KINEMATICS}),
)

BAT_SPEC = CategorySpec(
    category=Category.BAT,
    metrics=(
        SubMetricSpec(
            "bat_ke", Direction.HIGHER, _bands((500, 90), (380, 80), (260, 65), (150, 50)), 0.25, MetricSource.ENERGY
        ),
        SubMetricSpec(
            "arms_ke", Direction.HIGHER, _bands((220, 90), (180, 80), (140, 65), (100, 50)), 0.20, MetricSource.ENERGY
        ),
        SubMetricSpec(
            "bat_efficiency", Direction.HIGHER, _bands((55, 90), (45, 80), (35, 65), (25, 50)), 0.25, MetricSource.ENERGY
        ),
        SubMetricSpec(
            "torso_to_arms_transfer_pct",
            Direction.HIGHER,
            _bands((130, 90), (110, 80), (90, 65), (70, 50)),
            0.15,
            MetricSource.ENERGY,
        ),
        SubMetricSpec(
            "proper_sequence_pct",
            Direction.HIGHER,
            _bands((90, 90), (75, 80), (60, 65), (40, 50)),
            0.15,
            MetricSource.KINEMATICS,
        ),
    ),
    requires=frozenset({MetricSource.ENERGY}),
)

BALL_SPEC = CategorySpec(
    category=Category.BALL,
    metrics=(
        SubMetricSpec(
            "avg_exit_velo",
            Direction.HIGHER,
            _bands((95, 90), (90, 80), (85, 65), (78, 50)),
            0.30,
            MetricSource.LAUNCH_MONITOR,
        ),
        SubMetricSpec(
            "barrel_pct", Direction.HIGHER, _bands((15, 90), (10, 80), (6, 65), (3, 50)), 0.25, MetricSource.LAUNCH_MONITOR
        ),
        SubMetricSpec(
            "hard_hit_pct",
            Direction.HIGHER,
            _bands((50, 90), (40, 80), (30, 65), (20, 50)),
            0.20,
            MetricSource.LAUNCH_MONITOR,
        ),
        SubMetricSpec(
            "optimal_la_pct",
            Direction.HIGHER,
            _bands((45, 90), (35, 80), (25, 65), (15, 50)),
            0.15,
            MetricSource.LAUNCH_MONITOR,
        ),
        SubMetricSpec(
            "cv_total_ke", Direction.LOWER, _bands((8, 90), (12, 80), (18, 65), (25, 50)), 0.10, MetricSource.CONSISTENCY
        ),
    ),
)

DEFAULT_CATEGORY_SPECS: tuple[CategorySpec, ...] = (BRAIN_SPEC, BODY_SPEC, BAT_SPEC, BALL_SPEC)

DEFAULT_COMPOSITE_WEIGHTS: dict[Category, float] = {
    Category.BRAIN: 0.20,
    Category.BODY: 0.35,
    Category.BAT: 0.30,
    Category.BALL: 0.15,
}

DEFAULT_GRADE_LADDER: tuple[tuple[float, Grade], ...] = (
    (80.0, Grade.PLUS_PLUS),
    (70.0, Grade.PLUS),
    (60.0, Grade.ABOVE_AVERAGE),
    (50.0, Grade.AVERAGE),
    (40.0, Grade.BELOW_AVERAGE),
)


@dataclass(frozen=True)
class LevelThresholds:
    label: str
    barrel_ev_min: float
    barrel_la_min: float
    barrel_la_max: float
    hard_hit_ev_min: float


LEVEL_THRESHOLDS: dict[str, LevelThresholds] = {
    "youth": LevelThresholds("Youth (12U)", 65, 10, 30, 60),
    "middle_school": LevelThresholds("Middle School", 70, 10, 30, 65),
    "high_school": LevelThresholds("High School", 80, 10, 30, 75),
    "college": LevelThresholds("College", 90, 8, 32, 85),
    "pro": LevelThresholds("Professional", 95, 8, 32, 95),
}

LEVEL_ALIASES: dict[str, str] = {
    "hs": "high_school",
    "12u": "youth",
    "ms": "middle_school",
    "ncaa": "college",
    "mlb": "pro",
    "milb": "pro",
    "professional": "pro",
}


# Plausible (min, max) bat speed in mph per level. Levels without an entry use high_school.
BAT_SPEED_CLAMPS: dict[str, tuple[float, float]] = {
    "youth": (45.0, 85.0),
    "high_school": (55.0, 95.0),
    "college": (60.0, 105.0),
    "pro": (65.0, 110.0),
}
EXIT_VELO_CURRENT_RANGE: tuple[float, float] = (55.0, 115.0)
EXIT_VELO_CEILING_MAX = 120.0


@dataclass(frozen=True)
class BallPointSettings:
    """Per-swing points for the ball score, strictly decreasing by tier."""

    barrel: float = 10.0
    quality: float = 6.0
    in_play: float = 3.0
    foul: float = 0.0
    miss: float = -3.0
    # Points-per-swing mapped linearly onto 0..100 between these bounds.
    floor: float = -3.0
    ceiling: float = 8.0


@dataclass(frozen=True)
class SessionSettings:
    default_level: str = "high_school"
    optimal_la_min: float = 10.0
    optimal_la_max: float = 25.0
    ground_ball_max_la: float = 10.0
    fly_ball_min_la: float = 25.0
    sweet_spot_min_la: float = 8.0
    sweet_spot_max_la: float = 32.0
    velo_thresholds: tuple[float, float, float] = (90.0, 95.0, 100.0)
    # Four-bucket launch-angle split: ground < 5, line 5..20, fly 20..35, pop-up > 35.
    la_bucket_edges: tuple[float, float, float] = (5.0, 20.0, 35.0)


@dataclass(frozen=True)
class KineticSettings:
    default_weight_lbs: float = 165.0
    default_height_inches: float = 68.0
    baseline_height_inches: float = 68.0
    speed_multiplier: float = 2.5
    efficiency_scale: float = 1.4
    ceiling_uplift: float = 1.25
    min_swings: int = 3
    # Bat speed in mph per square root of delivered joules.
    bat_speed_constant: float = 4.25
    target_delivery_efficiency_pct: float = 55.0


@dataclass(frozen=True)
class MotorProfileSettings:
    high_points: int = 5
    medium_points: int = 3


@dataclass(frozen=True)
class ScoringSettings:
    categories: tuple[CategorySpec, ...] = DEFAULT_CATEGORY_SPECS
    composite_weights: dict[Category, float] = field(default_factory=lambda: dict(DEFAULT_COMPOSITE_WEIGHTS))
    grade_ladder: tuple[tuple[float, Grade], ...] = DEFAULT_GRADE_LADDER
    ball_points: BallPointSettings = field(default_factory=BallPointSettings)
    session: SessionSettings = field(default_factory=SessionSettings)
    kinetic: KineticSettings = field(default_factory=KineticSettings)
    motor_profile: MotorProfileSettings = field(default_factory=MotorProfileSettings)
    min_swings_for_cv: int = 3


DEFAULT_SETTINGS = ScoringSettings()


def resolve_level(level: str | None, default: str = "high_school") -> str:
    """Map a free-form level tag ("HS", "High School", "mlb") onto a known level key."""
    if not level:
        return default
    key = level.strip().lower().replace(" ", "_").replace("-", "_")
    key = LEVEL_ALIASES.get(key, key)
    return key if key in LEVEL_THRESHOLDS else default
