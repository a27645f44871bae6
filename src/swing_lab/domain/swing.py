from dataclasses import dataclass
from enum import StrEnum

from swing_lab.domain.errors import RowRejection


class Outcome(StrEnum):
    MISS = "miss"
    FOUL = "foul"
    BALL_IN_PLAY = "ball_in_play"


class BattedBallType(StrEnum):
    GROUND_BALL = "ground_ball"
    LINE_DRIVE = "line_drive"
    FLY_BALL = "fly_ball"


@dataclass(frozen=True)
class SwingRecord:
    """One batted-ball event from a launch monitor export.

    A miss never carries exit velocity, launch angle, distance or a batted-ball
    type; a ball in play always carries a positive exit velocity.
    """

    outcome: Outcome
    exit_velo: float | None = None
    launch_angle: float | None = None
    distance: float | None = None
    batted_ball_type: BattedBallType | None = None
    result_label: str = ""
    hit_type_label: str = ""
    spray_angle: float | None = None
    user: str = ""

    def __post_init__(self) -> None:
        if self.outcome is Outcome.MISS:
            carried = (self.exit_velo, self.launch_angle, self.distance, self.batted_ball_type)
            if any(v is not None for v in carried):
                msg = "A miss cannot carry exit velocity, launch angle, distance or batted-ball type"
                raise ValueError(msg)
        elif self.outcome is Outcome.BALL_IN_PLAY and (self.exit_velo is None or self.exit_velo <= 0):
            msg = f"A ball in play needs a positive exit velocity, got {self.exit_velo!r}"
            raise ValueError(msg)

    @property
    def is_contact(self) -> bool:
        return self.outcome is not Outcome.MISS


@dataclass(frozen=True)
class NormalizedSwings:
    swings: tuple[SwingRecord, ...]
    dropped_rows: int = 0
    rejections: tuple[RowRejection, ...] = ()
