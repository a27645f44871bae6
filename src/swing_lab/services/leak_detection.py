import logging
from collections.abc import Iterable, Sequence

import numpy as np

from swing_lab.domain.metrics import SwingMetrics
from swing_lab.domain.scores import LeakDiagnosis, LeakType

logger = logging.getLogger(__name__)

NO_BAT_KE_J = 10.0
TORSO_BYPASS_TRANSFER_PCT = 50.0
EARLY_ARMS_SEQUENCE_SHARE = 0.4
CLEAN_SEQUENCE_SHARE = 0.7
CLEAN_BAT_EFFICIENCY_PCT = 30.0
MAJORITY = 0.5

LEAK_MESSAGES: dict[LeakType, tuple[str, str]] = {
    LeakType.CLEAN_TRANSFER: (
        "Energy moves cleanly from the ground to the barrel.",
        "Maintain the current pattern and build strength behind it.",
    ),
    LeakType.LATE_LEGS: (
        "The legs produce energy, but it peaks after the arms have already fired.",
        "Get into the ground earlier so the lower half leads the swing.",
    ),
    LeakType.EARLY_ARMS: (
        "The upper body fires before the hips finish rotating.",
        "Let the hips lead the hands; work on separation drills.",
    ),
    LeakType.TORSO_BYPASS: (
        "Energy stalls in the torso instead of reaching the arms.",
        "Connect the core to the arms through the turn.",
    ),
    LeakType.NO_BAT_DELIVERY: (
        "Energy is not reaching the barrel.",
        "Focus on connection through the core and a direct path to the ball.",
    ),
    LeakType.UNKNOWN: ("", ""),
}


def detect_leak(swings: Sequence[SwingMetrics]) -> LeakDiagnosis:
    """Name the dominant energy leak across the energy-transfer swings.

    Checks run in order and the first that fires wins: no bat delivery,
    late legs, torso bypass, early arms, clean transfer. Late legs reads the
    energy peak order. Early arms reads the kinematic sequence (pelvis peaking
    before torso) and is skipped for swings without kinematics.
    """
    energy = [s for s in swings if s.has_energy]
    if not energy:
        return _diagnosis(LeakType.UNKNOWN)

    n = len(energy)
    recorded_bat = [s for s in energy if s.bat_ke is not None]
    if recorded_bat and _share(s.bat_ke is not None and s.bat_ke < NO_BAT_KE_J for s in recorded_bat) > MAJORITY:
        return _diagnosis(LeakType.NO_BAT_DELIVERY)

    late_legs = _share(
        s.legs_peak_ms is not None and s.arms_peak_ms is not None and s.legs_peak_ms > s.arms_peak_ms for s in energy
    )
    if late_legs > MAJORITY:
        return _diagnosis(LeakType.LATE_LEGS)

    transfers = [s.torso_to_arms_transfer_pct for s in energy if s.torso_ke and s.torso_to_arms_transfer_pct is not None]
    if transfers and float(np.mean(transfers)) < TORSO_BYPASS_TRANSFER_PCT:
        return _diagnosis(LeakType.TORSO_BYPASS)

    sequenced = [s.proper_sequence for s in swings if s.proper_sequence is not None]
    proper_share = sum(sequenced) / len(sequenced) if sequenced else None
    if proper_share is not None and proper_share < EARLY_ARMS_SEQUENCE_SHARE:
        return _diagnosis(LeakType.EARLY_ARMS)

    efficiencies = [s.bat_efficiency for s in recorded_bat if s.bat_efficiency is not None]
    bat_efficiency = float(np.mean(efficiencies)) if efficiencies else None
    sequence_ok = proper_share is None or proper_share > CLEAN_SEQUENCE_SHARE
    if sequence_ok and bat_efficiency is not None and bat_efficiency > CLEAN_BAT_EFFICIENCY_PCT:
        return _diagnosis(LeakType.CLEAN_TRANSFER)

    logger.debug("No leak pattern matched across %d energy swings", n)
    return _diagnosis(LeakType.UNKNOWN)


def _share(flags: Iterable[bool]) -> float:
    values = list(flags)
    return sum(values) / len(values) if values else 0.0


def _diagnosis(leak_type: LeakType) -> LeakDiagnosis:
    caption, training = LEAK_MESSAGES[leak_type]
    return LeakDiagnosis(leak_type=leak_type, caption=caption, training=training)
