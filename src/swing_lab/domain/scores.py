from dataclasses import dataclass, field
from enum import StrEnum

from swing_lab.domain.detection import Confidence


class Category(StrEnum):
    BRAIN = "brain"
    BODY = "body"
    BAT = "bat"
    BALL = "ball"


# Tie-break order for weakest-category selection and profile ranking.
CATEGORY_ORDER: tuple[Category, ...] = (Category.BRAIN, Category.BODY, Category.BAT, Category.BALL)


class Grade(StrEnum):
    PLUS_PLUS = "Plus-Plus"
    PLUS = "Plus"
    ABOVE_AVERAGE = "Above Average"
    AVERAGE = "Average"
    BELOW_AVERAGE = "Below Average"
    NEEDS_DEVELOPMENT = "Needs Development"


class MotorProfileLabel(StrEnum):
    SPINNER = "spinner"
    WHIPPER = "whipper"
    SLINGSHOTTER = "slingshotter"
    TITAN = "titan"


PROFILE_ORDER: tuple[MotorProfileLabel, ...] = (
    MotorProfileLabel.SPINNER,
    MotorProfileLabel.WHIPPER,
    MotorProfileLabel.SLINGSHOTTER,
    MotorProfileLabel.TITAN,
)


class LeakType(StrEnum):
    CLEAN_TRANSFER = "clean_transfer"
    LATE_LEGS = "late_legs"
    EARLY_ARMS = "early_arms"
    TORSO_BYPASS = "torso_bypass"
    NO_BAT_DELIVERY = "no_bat_delivery"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SubScore:
    raw_value: float
    score: float
    weight: float


@dataclass(frozen=True)
class ScoreComponents:
    category: Category
    score: float
    sub_scores: dict[str, SubScore]
    metric_set: str = "primary"
    grade: Grade | None = None


@dataclass(frozen=True)
class MotorProfile:
    label: MotorProfileLabel
    confidence: Confidence
    characteristics: tuple[str, ...] = ()
    points: dict[str, int] = field(default_factory=dict)
    secondary: MotorProfileLabel | None = None


@dataclass(frozen=True)
class KineticPotential:
    current_estimate_mph: float
    ceiling_mph: float
    mph_left_on_table: float
    mass_adjusted_energy: float
    lever_index: float
    efficiency_ratio: float
    body_mass_kg: float
    height_inches: float
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class KineticProjections:
    """Level-clamped bat-speed and exit-velocity projections from delivered energy.

    ``used_bat_ke`` is False when bat energy was not tracked and delivery was
    estimated from arms energy and the torso-to-arms transfer.
    """

    level: str
    bat_speed_current_mph: float
    bat_speed_ceiling_mph: float
    exit_velo_current_mph: float
    exit_velo_ceiling_mph: float
    delivery_efficiency_pct: float
    potential_delivery_efficiency_pct: float
    used_bat_ke: bool = True


@dataclass(frozen=True)
class LeakDiagnosis:
    leak_type: LeakType
    caption: str = ""
    training: str = ""


@dataclass(frozen=True)
class ConsistencyMetrics:
    """Coefficients of variation (percent) across swings.

    ``valid`` is False when there were too few swings for the CVs to mean
    anything; the values are then ``None``.
    """

    valid: bool = False
    cv_legs_ke: float | None = None
    cv_torso_ke: float | None = None
    cv_arms_ke: float | None = None
    cv_output: float | None = None
    cv_total_ke: float | None = None
    cv_bat_efficiency: float | None = None
    cv_pelvis_velocity: float | None = None
    cv_torso_velocity: float | None = None


@dataclass(frozen=True)
class RebootScores:
    categories: dict[Category, ScoreComponents]
    composite: float | None
    grade: Grade | None
    weakest_category: Category | None
    motor_profile: MotorProfile
    kinetic_potential: KineticPotential | None
    leak: LeakDiagnosis
    consistency: ConsistencyMetrics
    raw_metrics: dict[str, float]
    swing_count: int = 0
    warnings: tuple[str, ...] = ()
    projections: KineticProjections | None = None

    def category_score(self, category: Category) -> float | None:
        components = self.categories.get(category)
        return components.score if components is not None else None
