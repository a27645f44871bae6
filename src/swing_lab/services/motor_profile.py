"""Motor-profile voting.

Each profile owns a fixed set of rules. Every rule that holds adds its
points to its profile; the profile with the most points is the label and the
runner-up is kept as secondary context. Ties follow ``PROFILE_ORDER``.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from swing_lab.domain.detection import Confidence
from swing_lab.domain.scores import PROFILE_ORDER, Category, MotorProfile, MotorProfileLabel
from swing_lab.domain.settings import MotorProfileSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileInputs:
    metrics: Mapping[str, float]
    category_scores: Mapping[Category, float]
    weight_lbs: float | None = None

    def get(self, key: str) -> float | None:
        return self.metrics.get(key)

    def score(self, category: Category) -> float | None:
        return self.category_scores.get(category)


@dataclass(frozen=True)
class ProfileRule:
    profile: MotorProfileLabel
    description: str
    points: int
    applies: Callable[[ProfileInputs], bool]


def _at_least(key: str, threshold: float) -> Callable[[ProfileInputs], bool]:
    def check(inputs: ProfileInputs) -> bool:
        value = inputs.get(key)
        return value is not None and value >= threshold

    return check


def _below(key: str, threshold: float) -> Callable[[ProfileInputs], bool]:
    def check(inputs: ProfileInputs) -> bool:
        value = inputs.get(key)
        return value is not None and value < threshold

    return check


def _above(key: str, threshold: float) -> Callable[[ProfileInputs], bool]:
    def check(inputs: ProfileInputs) -> bool:
        value = inputs.get(key)
        return value is not None and value > threshold

    return check


def _between(key: str, low: float, high: float) -> Callable[[ProfileInputs], bool]:
    def check(inputs: ProfileInputs) -> bool:
        value = inputs.get(key)
        return value is not None and low <= value <= high

    return check


def _dominates(lead: Category, trail: Category, margin: float) -> Callable[[ProfileInputs], bool]:
    def check(inputs: ProfileInputs) -> bool:
        a, b = inputs.score(lead), inputs.score(trail)
        return a is not None and b is not None and a > b + margin

    return check


def _rotation_ratio(low: float, high: float) -> Callable[[ProfileInputs], bool]:
    def check(inputs: ProfileInputs) -> bool:
        pelvis, torso = inputs.get("pelvis_velocity"), inputs.get("torso_velocity")
        if not pelvis or torso is None:
            return False
        return low <= torso / pelvis <= high

    return check


def _heavy(threshold: float) -> Callable[[ProfileInputs], bool]:
    def check(inputs: ProfileInputs) -> bool:
        return inputs.weight_lbs is not None and inputs.weight_lbs >= threshold

    return check


_P = MotorProfileLabel

PROFILE_RULES: tuple[ProfileRule, ...] = (
    ProfileRule(_P.SPINNER, "Pulls the ball often", 2, _at_least("pull_pct", 40)),
    ProfileRule(_P.SPINNER, "Wide exit-velocity spread", 1, _at_least("exit_velo_std", 8)),
    ProfileRule(_P.SPINNER, "Keeps the ball off the ground", 1, _below("ground_ball_pct", 40)),
    ProfileRule(_P.SPINNER, "Body score leads bat score", 2, _dominates(Category.BODY, Category.BAT, 5)),
    ProfileRule(_P.SPINNER, "Pelvis and torso peak nearly together", 2, _below("peak_gap_ms", 25)),
    ProfileRule(_P.WHIPPER, "Torso speeds up well past the pelvis", 2, _rotation_ratio(1.4, 1.9)),
    ProfileRule(_P.WHIPPER, "Measured pelvis-to-torso timing gap", 2, _between("peak_gap_ms", 25, 55)),
    ProfileRule(_P.WHIPPER, "Efficient energy delivery to the bat", 1, _at_least("bat_efficiency", 45)),
    ProfileRule(_P.WHIPPER, "Bat score leads body score", 2, _dominates(Category.BAT, Category.BODY, 5)),
    ProfileRule(_P.SLINGSHOTTER, "Long pelvis-to-torso timing gap", 2, _above("peak_gap_ms", 55)),
    ProfileRule(_P.SLINGSHOTTER, "Large hip-shoulder separation", 2, _at_least("x_factor", 35)),
    ProfileRule(_P.SLINGSHOTTER, "Lifts the ball", 1, _at_least("fly_ball_pct", 35)),
    ProfileRule(_P.SLINGSHOTTER, "Frequent optimal launch angles", 1, _at_least("optimal_la_pct", 35)),
    ProfileRule(_P.TITAN, "Heavy frame", 2, _heavy(210)),
    ProfileRule(_P.TITAN, "Large leg energy", 2, _at_least("legs_ke", 400)),
    ProfileRule(_P.TITAN, "High average exit velocity", 1, _at_least("avg_exit_velo", 92)),
    ProfileRule(_P.TITAN, "Top-end exit velocity", 1, _at_least("max_exit_velo", 100)),
)


def classify_motor_profile(
    inputs: ProfileInputs,
    settings: MotorProfileSettings | None = None,
    rules: tuple[ProfileRule, ...] = PROFILE_RULES,
) -> MotorProfile:
    settings = settings or MotorProfileSettings()
    points = {label: 0 for label in PROFILE_ORDER}
    fired: dict[MotorProfileLabel, list[str]] = {label: [] for label in PROFILE_ORDER}
    for rule in rules:
        if rule.applies(inputs):
            points[rule.profile] += rule.points
            fired[rule.profile].append(rule.description)

    ranked = sorted(PROFILE_ORDER, key=lambda label: (-points[label], PROFILE_ORDER.index(label)))
    winner, runner_up = ranked[0], ranked[1]
    top = points[winner]
    if top >= settings.high_points:
        confidence = Confidence.HIGH
    elif top >= settings.medium_points:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    logger.debug("Motor profile points: %s", {label.value: p for label, p in points.items()})
    return MotorProfile(
        label=winner,
        confidence=confidence,
        characteristics=tuple(fired[winner]),
        points={label.value: p for label, p in points.items()},
        secondary=runner_up if points[runner_up] > 0 else None,
    )
