import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace

import numpy as np

from swing_lab.domain.frames import MatchedSwingRecord
from swing_lab.domain.metrics import SwingMetrics
from swing_lab.domain.scores import (
    CATEGORY_ORDER,
    Category,
    ConsistencyMetrics,
    Grade,
    RebootScores,
    ScoreComponents,
)
from swing_lab.domain.session_stats import SessionStats
from swing_lab.domain.settings import DEFAULT_SETTINGS, MetricSource, ScoringSettings
from swing_lab.services.kinetic_potential import project, project_speeds
from swing_lab.services.leak_detection import detect_leak
from swing_lab.services.motor_profile import ProfileInputs, classify_motor_profile
from swing_lab.services.step_scoring import available_sources, score_category
from swing_lab.services.swing_metrics import compute_swing_metrics, consistency_metrics

logger = logging.getLogger(__name__)

# Session fields that feed the Ball category and the motor-profile rules.
_SESSION_KEYS = (
    "avg_exit_velo",
    "max_exit_velo",
    "exit_velo_std",
    "barrel_pct",
    "hard_hit_pct",
    "optimal_la_pct",
    "ground_ball_pct",
    "fly_ball_pct",
    "pull_pct",
)

_MEAN_KEYS = (
    "pelvis_velocity",
    "torso_velocity",
    "x_factor",
    "peak_gap_ms",
    "lead_knee_at_contact",
    "lead_elbow_at_contact",
    "legs_ke",
    "torso_ke",
    "arms_ke",
    "total_ke",
    "torso_to_arms_transfer_pct",
)

_CONSISTENCY_KEYS = (
    "cv_legs_ke",
    "cv_torso_ke",
    "cv_arms_ke",
    "cv_output",
    "cv_total_ke",
    "cv_bat_efficiency",
    "cv_pelvis_velocity",
    "cv_torso_velocity",
)


def grade_for(score: float, ladder: Sequence[tuple[float, Grade]]) -> Grade:
    """Letter grade for a composite score; ladder bounds are inclusive."""
    for lower_bound, grade in sorted(ladder, key=lambda step: step[0], reverse=True):
        if score >= lower_bound:
            return grade
    return Grade.NEEDS_DEVELOPMENT


def weakest_category(categories: Mapping[Category, ScoreComponents]) -> Category | None:
    """Strict minimum score; equal scores resolve in Brain, Body, Bat, Ball order."""
    present = [c for c in CATEGORY_ORDER if c in categories]
    if not present:
        return None
    return min(present, key=lambda c: (categories[c].score, CATEGORY_ORDER.index(c)))


def session_metrics(
    swings: Sequence[SwingMetrics],
    consistency: ConsistencyMetrics,
) -> dict[str, float]:
    """Average per-swing metrics into session-level named metrics."""
    metrics: dict[str, float] = {}
    for key in _MEAN_KEYS:
        values = [v for s in swings if (v := getattr(s, key)) is not None]
        if values:
            metrics[key] = round(float(np.mean(values)), 2)

    bat_swings = [s for s in swings if s.bat_ke is not None]
    if bat_swings:
        metrics["bat_ke"] = round(float(np.mean([s.bat_ke for s in bat_swings])), 2)
        efficiencies = [s.bat_efficiency for s in bat_swings if s.bat_efficiency is not None]
        if efficiencies:
            metrics["bat_efficiency"] = round(float(np.mean(efficiencies)), 2)

    sequenced = [s.proper_sequence for s in swings if s.proper_sequence is not None]
    if sequenced:
        metrics["proper_sequence_pct"] = round(sum(sequenced) / len(sequenced) * 100, 1)

    if consistency.valid:
        for key in _CONSISTENCY_KEYS:
            value = getattr(consistency, key)
            if value is not None:
                metrics[key] = value
    return metrics


def launch_monitor_metrics(session: SessionStats | None) -> dict[str, float]:
    if session is None or session.total_swings == 0:
        return {}
    return {key: float(v) for key in _SESSION_KEYS if (v := getattr(session, key)) is not None}


def score(
    matched_swings: Sequence[MatchedSwingRecord] = (),
    *,
    raw_metrics: Mapping[str, float | None] | None = None,
    session: SessionStats | None = None,
    weight_lbs: float | None = None,
    height_inches: float | None = None,
    dominant_hand: str | None = None,
    level: str | None = None,
    settings: ScoringSettings | None = None,
) -> RebootScores:
    """Compute Brain/Body/Bat/Ball scores, the composite, and the diagnostics.

    Inputs combine freely: matched motion-capture swings, a launch-monitor
    ``session``, and caller-supplied ``raw_metrics`` (plate discipline or any
    named metric), which override derived values of the same name.

    A category is scored from whichever of its sub-metrics are present and is
    omitted when none are, or when its required data source is missing. The
    composite and grade are produced only when all four categories are
    present and, if motion capture was supplied, both kinematics and energy
    sides were usable; otherwise they are ``None`` and a warning explains why.

    Each present category is graded on the same ladder as the composite.
    ``level`` selects the plausible bat-speed range for ``projections``;
    unknown or absent levels use the configured default level.

    Missing player height or weight never raises: population defaults are
    used and flagged in ``warnings``.
    """
    settings = settings or DEFAULT_SETTINGS
    warnings: list[str] = []
    records = _unique_records(matched_swings, warnings)
    hand = (dominant_hand or "R").strip().upper()[:1] or "R"

    per_swing = [compute_swing_metrics(r, dominant_hand=hand) for r in records]
    has_kinematics = any(m.has_kinematics for m in per_swing)
    has_energy = any(m.has_energy for m in per_swing)
    consistency = consistency_metrics(per_swing, settings.min_swings_for_cv)

    metrics: dict[str, float] = {}
    metrics.update(session_metrics(per_swing, consistency))
    metrics.update(launch_monitor_metrics(session))
    if raw_metrics:
        metrics.update({k: float(v) for k, v in raw_metrics.items() if v is not None})
    metrics = dict(sorted(metrics.items()))

    sources = available_sources(settings.categories, metrics)
    categories: dict[Category, ScoreComponents] = {}
    for spec in settings.categories:
        components = score_category(spec, metrics, sources)
        if components is None:
            warnings.append(_missing_category_warning(spec.category, spec.requires - sources))
            continue
        categories[spec.category] = replace(components, grade=grade_for(components.score, settings.grade_ladder))

    composite, grade = _composite(categories, records, has_kinematics, has_energy, settings, warnings)

    kinetic = project(per_swing, weight_lbs, height_inches, settings=settings)
    if kinetic is not None:
        warnings.extend(kinetic.warnings)

    profile = classify_motor_profile(
        ProfileInputs(
            metrics=metrics,
            category_scores={c: comp.score for c, comp in categories.items()},
            weight_lbs=weight_lbs,
        ),
        settings.motor_profile,
    )

    leak = detect_leak(per_swing)
    projections = project_speeds(per_swing, leak.leak_type, level, settings=settings)

    swing_count = len(records) if records else (session.total_swings if session is not None else 0)
    result = RebootScores(
        categories=categories,
        composite=composite,
        grade=grade,
        weakest_category=weakest_category(categories),
        motor_profile=profile,
        kinetic_potential=kinetic,
        leak=leak,
        consistency=consistency,
        raw_metrics=metrics,
        swing_count=swing_count,
        warnings=tuple(warnings),
        projections=projections,
    )
    logger.info(
        "Scored %d swings: composite=%s grade=%s weakest=%s",
        swing_count,
        composite,
        grade,
        result.weakest_category,
    )
    return result


def _unique_records(records: Sequence[MatchedSwingRecord], warnings: list[str]) -> list[MatchedSwingRecord]:
    seen: set[str] = set()
    unique: list[MatchedSwingRecord] = []
    duplicates: list[str] = []
    for record in records:
        if record.movement_id in seen:
            duplicates.append(record.movement_id)
            continue
        seen.add(record.movement_id)
        unique.append(record)
    if duplicates:
        warning = f"Duplicate movement ids scored once (first kept): {', '.join(sorted(set(duplicates)))}"
        logger.warning(warning)
        warnings.append(warning)
    return unique


def _composite(
    categories: Mapping[Category, ScoreComponents],
    records: Sequence[MatchedSwingRecord],
    has_kinematics: bool,
    has_energy: bool,
    settings: ScoringSettings,
    warnings: list[str],
) -> tuple[float | None, Grade | None]:
    missing = [c.value for c in CATEGORY_ORDER if c not in categories]
    if missing:
        warnings.append(f"Composite score unavailable: missing {', '.join(missing)} score(s)")
        return None, None
    if records and not (has_kinematics and has_energy):
        absent = "energy-transfer" if has_kinematics else "kinematics"
        warnings.append(f"Composite score unavailable: motion capture has no usable {absent} data")
        return None, None
    weighted = sum(settings.composite_weights[c] * categories[c].score for c in CATEGORY_ORDER)
    clamped = min(100.0, max(0.0, weighted))
    # Grade follows the unrounded sum.
    return round(clamped, 1), grade_for(clamped, settings.grade_ladder)


def _missing_category_warning(category: Category, missing_sources: frozenset[MetricSource]) -> str:
    if missing_sources:
        needed = ", ".join(sorted(s.value for s in missing_sources))
        return f"{category.value.title()} score unavailable: requires {needed} data"
    return f"{category.value.title()} score unavailable: no contributing metrics"
