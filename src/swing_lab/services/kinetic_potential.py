import logging
import math
from collections.abc import Sequence

import numpy as np

from swing_lab.domain.metrics import SwingMetrics
from swing_lab.domain.scores import KineticPotential, KineticProjections, LeakType
from swing_lab.domain.settings import (
    BAT_SPEED_CLAMPS,
    DEFAULT_SETTINGS,
    EXIT_VELO_CEILING_MAX,
    EXIT_VELO_CURRENT_RANGE,
    ScoringSettings,
    resolve_level,
)

logger = logging.getLogger(__name__)

LBS_PER_KG = 2.20462


def project(
    energy_metrics: Sequence[SwingMetrics],
    weight_lbs: float | None,
    height_inches: float | None,
    *,
    settings: ScoringSettings | None = None,
) -> KineticPotential | None:
    """Project current and ceiling bat-speed equivalents from energy-transfer swings.

    The potential speed scales with the square root of mean arms kinetic
    energy and with height relative to the baseline. The current estimate
    applies the measured efficiency ratio and the ceiling applies that ratio
    uplifted as if energy leaks were closed.

    Missing or non-positive weight and height fall back to population
    defaults and are flagged in ``warnings``; so are thin samples and zero
    arms energy. Returns ``None`` only when no swing carries energy data.
    """
    kinetic = (settings or DEFAULT_SETTINGS).kinetic
    swings = [m for m in energy_metrics if m.has_energy]
    if not swings:
        return None

    warnings: list[str] = []
    if weight_lbs is None or weight_lbs <= 0:
        weight_lbs = kinetic.default_weight_lbs
        warnings.append(f"Player weight not supplied; using population default of {weight_lbs:g} lb")
    if height_inches is None or height_inches <= 0:
        height_inches = kinetic.default_height_inches
        warnings.append(f"Player height not supplied; using population default of {height_inches:g} in")
    if len(swings) < kinetic.min_swings:
        warnings.append(
            f"Only {len(swings)} energy-transfer swing(s); at least {kinetic.min_swings} are needed for a "
            "confident projection"
        )

    mean_total = float(np.mean([s.total_ke or 0.0 for s in swings]))
    mean_arms = float(np.mean([s.arms_ke or 0.0 for s in swings]))
    if mean_arms <= 0:
        warnings.append("No arms kinetic energy recorded; projected speeds are zero")

    body_mass_kg = weight_lbs / LBS_PER_KG
    lever_index = height_inches / kinetic.baseline_height_inches
    efficiency = mean_arms / mean_total * kinetic.efficiency_scale if mean_total > 0 else 0.0
    efficiency = min(1.0, max(0.0, efficiency))

    potential = kinetic.speed_multiplier * math.sqrt(max(mean_arms, 0.0)) * lever_index
    current = potential * efficiency
    ceiling = potential * min(1.0, efficiency * kinetic.ceiling_uplift)

    for warning in warnings:
        logger.warning(warning)
    return KineticPotential(
        current_estimate_mph=round(current, 1),
        ceiling_mph=round(ceiling, 1),
        mph_left_on_table=round(max(0.0, ceiling - current), 1),
        mass_adjusted_energy=round(mean_total / body_mass_kg, 2),
        lever_index=round(lever_index, 3),
        efficiency_ratio=round(efficiency, 3),
        body_mass_kg=round(body_mass_kg, 1),
        height_inches=height_inches,
        warnings=tuple(warnings),
    )


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def project_speeds(
    energy_metrics: Sequence[SwingMetrics],
    leak_type: LeakType,
    level: str | None = None,
    *,
    settings: ScoringSettings | None = None,
) -> KineticProjections | None:
    """Project current and ceiling bat speed and exit velocity for the hitter's level.

    Delivered energy is mean bat KE when the bat was tracked; otherwise arms
    KE scaled by the torso-to-arms transfer stands in. The ceiling assumes
    delivery reaches the target efficiency and is lifted further when energy
    is not reaching the barrel. Bat speeds are clamped to the level's
    plausible range and exit velocities follow from them.
    """
    settings = settings or DEFAULT_SETTINGS
    kinetic = settings.kinetic
    swings = [m for m in energy_metrics if m.has_energy]
    if not swings:
        return None

    level_key = resolve_level(level, settings.session.default_level)
    mean_total = float(np.mean([s.total_ke or 0.0 for s in swings]))
    mean_bat = float(np.mean([s.bat_ke or 0.0 for s in swings]))
    used_bat_ke = any(s.has_bat_ke for s in swings) and mean_bat > 0

    if used_bat_ke:
        delivered = mean_bat
        efficiency = mean_bat / mean_total * 100 if mean_total > 0 else 0.0
    else:
        mean_arms = float(np.mean([s.arms_ke or 0.0 for s in swings]))
        transfer = float(np.mean([s.torso_to_arms_transfer_pct or 0.0 for s in swings]))
        delivered = mean_arms * transfer / 100
        efficiency = delivered / mean_total * 100 if mean_total > 0 else _clamp(transfer * 0.5, 0.0, 60.0)

    target = kinetic.target_delivery_efficiency_pct
    potential = mean_total * target / 100
    current = kinetic.bat_speed_constant * math.sqrt(max(delivered, 0.0))
    ceiling = kinetic.bat_speed_constant * math.sqrt(max(potential, delivered, 0.0))
    if leak_type is LeakType.NO_BAT_DELIVERY or efficiency < 30:
        ceiling = max(ceiling, current + 10)
    elif efficiency < 45:
        ceiling = max(ceiling, current + 6)

    low, high = BAT_SPEED_CLAMPS.get(level_key, BAT_SPEED_CLAMPS["high_school"])
    bat_current = _clamp(round(current), low, high)
    bat_ceiling = _clamp(round(ceiling), bat_current, high)
    ev_low, ev_high = EXIT_VELO_CURRENT_RANGE
    ev_current = _clamp(round(1.25 * bat_current + 5), ev_low, ev_high)
    ev_ceiling = _clamp(round(1.25 * bat_ceiling + 5), ev_current, EXIT_VELO_CEILING_MAX)

    logger.debug(
        "Projected %s bat speed %s -> %s mph (efficiency %.1f%%)", level_key, bat_current, bat_ceiling, efficiency
    )
    return KineticProjections(
        level=level_key,
        bat_speed_current_mph=float(bat_current),
        bat_speed_ceiling_mph=float(bat_ceiling),
        exit_velo_current_mph=float(ev_current),
        exit_velo_ceiling_mph=float(ev_ceiling),
        delivery_efficiency_pct=round(efficiency, 1),
        potential_delivery_efficiency_pct=target,
        used_bat_ke=used_bat_ke,
    )
