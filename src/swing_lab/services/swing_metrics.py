import logging
from collections.abc import Sequence

import numpy as np

from swing_lab.domain.frames import EnergyFrame, KinematicFrame, MatchedSwingRecord
from swing_lab.domain.metrics import SwingMetrics
from swing_lab.domain.scores import ConsistencyMetrics

logger = logging.getLogger(__name__)

MIN_ENERGY_FRAMES = 5
MIN_KINEMATIC_FRAMES = 10

# Frames up to just past max hand speed make up the swing phase.
_CONTACT_TOLERANCE_S = 0.01
_FALLBACK_WINDOW_S = 0.5
_FALLBACK_FRAME_COUNT = 100
_MIN_PHASE_FRAMES = 5
_KE_PERCENTILE = 95
# Bat KE samples outside [0, total KE] or above this are sensor glitches.
_MAX_PLAUSIBLE_BAT_KE = 1000.0
_BAT_KE_PRESENT = 1.0


def compute_swing_metrics(record: MatchedSwingRecord, *, dominant_hand: str = "R") -> SwingMetrics:
    """Derive per-swing metrics from one matched movement.

    Each side contributes its fields independently; a side that is absent or
    shorter than its minimum frame count leaves its fields ``None``.
    """
    kinematic = _kinematic_metrics(record.kinematic_frames, dominant_hand)
    energy = _energy_metrics(record.energy_frames)
    return SwingMetrics(movement_id=record.movement_id, **kinematic, **energy)


def _sorted_by_time[F: (KinematicFrame, EnergyFrame)](frames: Sequence[F]) -> list[F]:
    return sorted(frames, key=lambda f: f.time if f.time is not None else 0.0)


def _swing_phase(times: np.ndarray, from_max_hand: np.ndarray | None) -> np.ndarray:
    """Indices of the pre-contact window, falling back to a fixed time span or frame count."""
    if from_max_hand is not None:
        idx = np.flatnonzero(from_max_hand <= _CONTACT_TOLERANCE_S)
    else:
        idx = np.flatnonzero(times <= _FALLBACK_WINDOW_S)
    if idx.size == 0:
        idx = np.arange(min(_FALLBACK_FRAME_COUNT, times.size))
    return idx


def _column(frames: Sequence[object], name: str) -> np.ndarray:
    values = [getattr(f, name) for f in frames]
    return np.asarray([0.0 if v is None else v for v in values], dtype=np.float64)


def _from_max_hand(frames: Sequence[KinematicFrame] | Sequence[EnergyFrame]) -> np.ndarray | None:
    if all(f.time_from_max_hand is None for f in frames):
        return None
    # Frames without the marker never count as pre-contact.
    return np.asarray(
        [np.inf if f.time_from_max_hand is None else f.time_from_max_hand for f in frames],
        dtype=np.float64,
    )


def _energy_metrics(frames: Sequence[EnergyFrame]) -> dict[str, float | bool | None]:
    if len(frames) < MIN_ENERGY_FRAMES:
        if frames:
            logger.debug("Skipping energy side with %d frames (< %d)", len(frames), MIN_ENERGY_FRAMES)
        return {}
    ordered = _sorted_by_time(frames)
    times = _column(ordered, "time")
    idx = _swing_phase(times, _from_max_hand(ordered))

    legs = _column(ordered, "legs_ke")[idx]
    torso = _column(ordered, "torso_ke")[idx]
    arms = _column(ordered, "arms_ke")[idx]
    total = _column(ordered, "total_ke")[idx]
    bat_recorded = any(f.bat_ke is not None for f in ordered)
    bat_raw = _column(ordered, "bat_ke")[idx]
    bat = bat_raw[(bat_raw >= 0) & (bat_raw <= total) & (bat_raw < _MAX_PLAUSIBLE_BAT_KE)]

    legs_peak = float(np.percentile(legs, _KE_PERCENTILE))
    torso_peak = float(np.percentile(torso, _KE_PERCENTILE))
    arms_peak = float(np.percentile(arms, _KE_PERCENTILE))
    total_peak = float(np.percentile(total, _KE_PERCENTILE))
    bat_peak: float | None = None
    if bat_recorded:
        bat_peak = float(np.percentile(bat, _KE_PERCENTILE)) if bat.size else 0.0

    window_times = times[idx]
    return {
        "legs_ke": legs_peak,
        "torso_ke": torso_peak,
        "arms_ke": arms_peak,
        "bat_ke": bat_peak,
        "total_ke": total_peak,
        "bat_efficiency": _ratio_pct(bat_peak, total_peak) if bat_peak is not None else None,
        "torso_to_arms_transfer_pct": _ratio_pct(arms_peak, torso_peak),
        "legs_peak_ms": float(window_times[int(np.argmax(legs))]) * 1000,
        "arms_peak_ms": float(window_times[int(np.argmax(arms))]) * 1000,
        "has_bat_ke": bool(bat.size and np.max(bat) > _BAT_KE_PRESENT),
    }


def _ratio_pct(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def _velocities(values: np.ndarray, times: np.ndarray) -> np.ndarray:
    """Finite-difference rate of change; zero where time does not advance."""
    dv = np.diff(values)
    dt = np.diff(times)
    out = np.zeros_like(dv)
    np.divide(dv, dt, out=out, where=dt > 0)
    return out


def _kinematic_metrics(frames: Sequence[KinematicFrame], dominant_hand: str) -> dict[str, float | bool | None]:
    usable = [f for f in frames if f.pelvis_rot is not None and f.torso_rot is not None]
    if len(usable) < MIN_KINEMATIC_FRAMES:
        if frames:
            logger.debug("Skipping kinematics side with %d usable frames (< %d)", len(usable), MIN_KINEMATIC_FRAMES)
        return {}
    ordered = _sorted_by_time(usable)
    times = _column(ordered, "time")
    from_max_hand = _from_max_hand(ordered)
    idx = _swing_phase(times, from_max_hand)
    if idx.size < _MIN_PHASE_FRAMES:
        idx = np.arange(min(_FALLBACK_FRAME_COUNT, times.size))
        contact = int(idx[-1])
    elif from_max_hand is not None:
        contact = int(idx[np.argmin(np.abs(from_max_hand[idx]))])
    else:
        contact = int(idx[-1])

    phase_times = times[idx]
    pelvis = np.degrees(_column(ordered, "pelvis_rot")[idx])
    torso = np.degrees(_column(ordered, "torso_rot")[idx])
    pelvis_vel = np.abs(_velocities(pelvis, phase_times))
    torso_vel = np.abs(_velocities(torso, phase_times))

    # Velocity i spans frames i..i+1 and is stamped at the later frame.
    pelvis_peak_ms = float(phase_times[int(np.argmax(pelvis_vel)) + 1]) * 1000
    torso_peak_ms = float(phase_times[int(np.argmax(torso_vel)) + 1]) * 1000

    lead = "left" if dominant_hand.upper().startswith("R") else "right"
    contact_frame = ordered[contact]
    return {
        "pelvis_velocity": float(np.max(pelvis_vel)),
        "torso_velocity": float(np.max(torso_vel)),
        "x_factor": float(np.max(np.abs(torso - pelvis))),
        "peak_gap_ms": torso_peak_ms - pelvis_peak_ms,
        "proper_sequence": pelvis_peak_ms < torso_peak_ms,
        "lead_knee_at_contact": _abs_degrees(getattr(contact_frame, f"{lead}_knee")),
        "lead_elbow_at_contact": _abs_degrees(getattr(contact_frame, f"{lead}_elbow")),
    }


def _abs_degrees(radians: float | None) -> float | None:
    return None if radians is None else abs(float(np.degrees(radians)))


def coefficient_of_variation(values: Sequence[float]) -> float | None:
    """Population CV in percent; ``None`` for fewer than two values or a zero mean."""
    if len(values) < 2:
        return None
    arr = np.asarray(values, dtype=np.float64)
    mean = float(np.mean(arr))
    if mean == 0:
        return None
    return round(float(np.std(arr)) / abs(mean) * 100, 2)


def consistency_metrics(swings: Sequence[SwingMetrics], min_swings: int = 3) -> ConsistencyMetrics:
    """Swing-to-swing variability. Valid only with at least ``min_swings`` energy swings."""
    energy = [s for s in swings if s.has_energy]
    if len(energy) < min_swings:
        return ConsistencyMetrics(valid=False)
    kinematic = [s for s in swings if s.has_kinematics]

    def cv(values: Sequence[float | None]) -> float | None:
        present = [v for v in values if v is not None]
        return coefficient_of_variation(present) if len(present) >= min_swings else None

    return ConsistencyMetrics(
        valid=True,
        cv_legs_ke=cv([s.legs_ke for s in energy]),
        cv_torso_ke=cv([s.torso_ke for s in energy]),
        cv_arms_ke=cv([s.arms_ke for s in energy]),
        cv_output=cv([delivered_energy(s) for s in energy]),
        cv_total_ke=cv([s.total_ke for s in energy]),
        cv_bat_efficiency=cv([s.bat_efficiency for s in energy]),
        cv_pelvis_velocity=cv([s.pelvis_velocity for s in kinematic]),
        cv_torso_velocity=cv([s.torso_velocity for s in kinematic]),
    )


def delivered_energy(swing: SwingMetrics) -> float | None:
    """Bat KE when the bat was tracked, otherwise arms KE as the delivery proxy."""
    return swing.bat_ke if swing.has_bat_ke else swing.arms_ke
