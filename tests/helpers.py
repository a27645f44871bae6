import math

from swing_lab.domain.frames import EnergyFrame, KinematicFrame, MatchedSwingRecord
from swing_lab.domain.metrics import SwingMetrics


def kinematic_frames(
    movement_id: str | None = "m1",
    *,
    n: int = 20,
    dt: float = 0.01,
    pelvis_peak_dps: float = 720.0,
    torso_peak_dps: float = 980.0,
    pelvis_peak_index: int = 6,
    torso_peak_index: int = 9,
    lead_knee_deg: float = 30.0,
    lead_elbow_deg: float = 90.0,
) -> list[KinematicFrame]:
    """Frames whose pelvis and torso speed up and slow down around the given peak indices.

    Angular velocity between frame ``i`` and ``i + 1`` equals the triangular
    profile at ``i``, so the peak velocity lands exactly on the requested rate.
    """
    pelvis = _integrate(_triangle(n, pelvis_peak_index, pelvis_peak_dps, dt))
    torso = _integrate(_triangle(n, torso_peak_index, torso_peak_dps, dt))
    end = (n - 1) * dt
    return [
        KinematicFrame(
            movement_id=movement_id,
            time=i * dt,
            time_from_max_hand=i * dt - end,
            pelvis_rot=pelvis[i],
            torso_rot=torso[i],
            left_knee=math.radians(lead_knee_deg),
            right_knee=math.radians(10.0),
            left_elbow=math.radians(lead_elbow_deg),
            right_elbow=math.radians(45.0),
        )
        for i in range(n)
    ]


def _triangle(n: int, peak: int, peak_dps: float, dt: float) -> list[float]:
    width = 4
    return [math.radians(peak_dps) * dt * max(0.0, 1 - abs(k - peak) / width) for k in range(n)]


def _integrate(steps: list[float]) -> list[float]:
    angles = [0.0]
    for step in steps[:-1]:
        angles.append(angles[-1] + step)
    return angles


def energy_frames(
    movement_id: str | None = "m1",
    *,
    n: int = 10,
    dt: float = 0.01,
    legs: float = 400.0,
    torso: float = 250.0,
    arms: float = 220.0,
    bat: float | None = 500.0,
    total: float = 900.0,
    legs_peak_index: int = 2,
    arms_peak_index: int = 5,
) -> list[EnergyFrame]:
    """Frames holding each segment at half its peak until its peak index, then at the peak.

    With the peak reached before the last two frames, the 95th percentile
    over the swing equals the peak value.
    """
    end = (n - 1) * dt

    def ramp(value: float, peak_index: int, i: int) -> float:
        return value if i >= peak_index else value / 2

    return [
        EnergyFrame(
            movement_id=movement_id,
            time=i * dt,
            time_from_max_hand=i * dt - end,
            legs_ke=ramp(legs, legs_peak_index, i),
            torso_ke=torso,
            arms_ke=ramp(arms, arms_peak_index, i),
            bat_ke=bat,
            total_ke=total,
        )
        for i in range(n)
    ]


def matched_swing(movement_id: str = "m1", **energy: float | None) -> MatchedSwingRecord:
    return MatchedSwingRecord(
        movement_id=movement_id,
        kinematic_frames=tuple(kinematic_frames(movement_id)),
        energy_frames=tuple(energy_frames(movement_id, **energy)),  # type: ignore[arg-type]
    )


def energy_swing(movement_id: str = "m1", **overrides: object) -> SwingMetrics:
    """Per-swing metrics for a clean energy transfer unless overridden."""
    values: dict[str, object] = {
        "legs_ke": 300.0,
        "torso_ke": 200.0,
        "arms_ke": 250.0,
        "bat_ke": 400.0,
        "total_ke": 900.0,
        "bat_efficiency": 44.4,
        "torso_to_arms_transfer_pct": 125.0,
        "legs_peak_ms": 50.0,
        "arms_peak_ms": 100.0,
        "has_bat_ke": True,
        "pelvis_velocity": 650.0,
        "torso_velocity": 900.0,
        "proper_sequence": True,
    }
    values.update(overrides)
    return SwingMetrics(movement_id=movement_id, **values)  # type: ignore[arg-type]
