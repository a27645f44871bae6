from dataclasses import dataclass, field
from enum import StrEnum

from swing_lab.domain.detection import SchemaKind


class Pairing(StrEnum):
    MOVEMENT_ID = "movement_id"
    POSITIONAL = "positional"
    SINGLE_SIDE = "single_side"


@dataclass(frozen=True)
class KinematicFrame:
    """One inverse-kinematics sample. Joint angles are in the export's units (radians)."""

    movement_id: str | None = None
    time: float | None = None
    time_from_max_hand: float | None = None
    pelvis_rot: float | None = None
    torso_rot: float | None = None
    left_knee: float | None = None
    right_knee: float | None = None
    left_elbow: float | None = None
    right_elbow: float | None = None
    extras: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EnergyFrame:
    """One momentum-energy sample. Kinetic energies are in joules."""

    movement_id: str | None = None
    time: float | None = None
    time_from_max_hand: float | None = None
    legs_ke: float | None = None
    torso_ke: float | None = None
    arms_ke: float | None = None
    bat_ke: float | None = None
    total_ke: float | None = None
    extras: dict[str, str] = field(default_factory=dict)


type Frame = KinematicFrame | EnergyFrame


@dataclass(frozen=True)
class FrameSet:
    kind: SchemaKind
    frames: tuple[Frame, ...]
    dropped_rows: int = 0


@dataclass(frozen=True)
class MatchedSwingRecord:
    movement_id: str
    kinematic_frames: tuple[KinematicFrame, ...] = ()
    energy_frames: tuple[EnergyFrame, ...] = ()

    @property
    def has_kinematics(self) -> bool:
        return bool(self.kinematic_frames)

    @property
    def has_energy(self) -> bool:
        return bool(self.energy_frames)


@dataclass(frozen=True)
class MatchResult:
    records: tuple[MatchedSwingRecord, ...]
    pairing: Pairing
    warnings: tuple[str, ...] = ()
    kinematic_groups: int = 0
    energy_groups: int = 0
