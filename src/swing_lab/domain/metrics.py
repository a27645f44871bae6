from dataclasses import dataclass


@dataclass(frozen=True)
class SwingMetrics:
    """Derived numbers for one matched swing.

    Kinematic fields are ``None`` when the swing had no usable IK frames and
    energy fields are ``None`` when it had no usable ME frames.
    """

    movement_id: str

    # IK: velocities in deg/s, angles in degrees, times in ms
    pelvis_velocity: float | None = None
    torso_velocity: float | None = None
    x_factor: float | None = None
    peak_gap_ms: float | None = None
    proper_sequence: bool | None = None
    lead_knee_at_contact: float | None = None
    lead_elbow_at_contact: float | None = None

    # ME: kinetic energy peaks in joules, efficiencies in percent
    legs_ke: float | None = None
    torso_ke: float | None = None
    arms_ke: float | None = None
    bat_ke: float | None = None
    total_ke: float | None = None
    bat_efficiency: float | None = None
    torso_to_arms_transfer_pct: float | None = None
    legs_peak_ms: float | None = None
    arms_peak_ms: float | None = None
    has_bat_ke: bool = False

    @property
    def has_kinematics(self) -> bool:
        return self.pelvis_velocity is not None

    @property
    def has_energy(self) -> bool:
        return self.total_ke is not None
