"""Flatten scoring results into plain records for the persistence layer.

Records are single-level dicts with snake_case keys. Enums become their
string values and nested value objects are prefixed with their parent name,
e.g. ``kinetic_potential_ceiling_mph``.
"""

from __future__ import annotations

from dataclasses import asdict, fields
from enum import Enum
from typing import TYPE_CHECKING, Any

from swing_lab.domain.scores import CATEGORY_ORDER

if TYPE_CHECKING:
    from swing_lab.domain.scores import RebootScores
    from swing_lab.domain.session_stats import SessionStats

type RecordValue = float | int | str | list[str] | None


def scores_to_record(scores: RebootScores) -> dict[str, RecordValue]:
    record: dict[str, RecordValue] = {
        "composite": scores.composite,
        "grade": _plain(scores.grade),
        "weakest_category": _plain(scores.weakest_category),
        "swing_count": scores.swing_count,
    }
    for category in CATEGORY_ORDER:
        components = scores.categories.get(category)
        prefix = category.value
        record[f"{prefix}_score"] = components.score if components is not None else None
        record[f"{prefix}_grade"] = _plain(components.grade) if components is not None else None
        record[f"{prefix}_metric_set"] = components.metric_set if components is not None else None
        if components is not None:
            for key, sub in components.sub_scores.items():
                record[f"{prefix}_{key}_raw"] = sub.raw_value
                record[f"{prefix}_{key}_score"] = sub.score
                record[f"{prefix}_{key}_weight"] = sub.weight

    profile = scores.motor_profile
    record["motor_profile"] = profile.label.value
    record["motor_profile_confidence"] = profile.confidence.value
    record["motor_profile_secondary"] = _plain(profile.secondary)
    record["motor_profile_characteristics"] = list(profile.characteristics)
    record.update({f"motor_profile_points_{label}": points for label, points in profile.points.items()})

    record["leak_type"] = scores.leak.leak_type.value
    record["leak_caption"] = scores.leak.caption or None
    record["leak_training"] = scores.leak.training or None

    if scores.kinetic_potential is not None:
        kinetic = asdict(scores.kinetic_potential)
        kinetic.pop("warnings")
        record.update({f"kinetic_potential_{k}": v for k, v in kinetic.items()})

    if scores.projections is not None:
        record.update({f"projection_{k}": v for k, v in asdict(scores.projections).items()})

    record["consistency_valid"] = scores.consistency.valid
    record.update({k: v for k, v in asdict(scores.consistency).items() if k != "valid"})
    record.update({f"metric_{k}": v for k, v in scores.raw_metrics.items()})
    record["warnings"] = list(scores.warnings)
    return record


def session_to_record(stats: SessionStats) -> dict[str, RecordValue]:
    record: dict[str, Any] = {}
    for f in fields(stats):
        value = getattr(stats, f.name)
        if f.name == "la_distribution":
            record.update({f"la_{k}": v for k, v in asdict(value).items()})
        elif f.name in ("results_breakdown", "hit_types_breakdown"):
            record.update({f"{f.name.removesuffix('_breakdown')}_{_key(k)}": n for k, n in value.items()})
        else:
            record[f.name] = _plain(value)
    return record


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _key(label: str) -> str:
    return "_".join(label.lower().split())
