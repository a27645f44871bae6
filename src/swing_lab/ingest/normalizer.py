import logging
from collections.abc import Mapping

from swing_lab.domain.detection import DetectionResult, SchemaKind
from swing_lab.domain.errors import RowRejection, SchemaError
from swing_lab.domain.frames import EnergyFrame, Frame, FrameSet, KinematicFrame
from swing_lab.domain.result import Err, Ok, Result, partition
from swing_lab.domain.settings import SessionSettings
from swing_lab.domain.swing import BattedBallType, NormalizedSwings, Outcome, SwingRecord
from swing_lab.domain.table import RawTable
from swing_lab.ingest.numeric import parse_number, parse_optional
from swing_lab.ingest.signatures import normalize_header

logger = logging.getLogger(__name__)

MISS_LABELS = frozenset(
    {"miss", "strike", "swinging strike", "strike swinging", "swingingstrike", "whiff", "k", "strikeout"}
)
FOUL_LABELS = frozenset({"foul", "foul ball", "foulball"})

HIT_TYPE_LABELS: dict[str, BattedBallType] = {
    "gb": BattedBallType.GROUND_BALL,
    "ground": BattedBallType.GROUND_BALL,
    "groundball": BattedBallType.GROUND_BALL,
    "ground ball": BattedBallType.GROUND_BALL,
    "ld": BattedBallType.LINE_DRIVE,
    "line": BattedBallType.LINE_DRIVE,
    "linedrive": BattedBallType.LINE_DRIVE,
    "line drive": BattedBallType.LINE_DRIVE,
    "fb": BattedBallType.FLY_BALL,
    "fly": BattedBallType.FLY_BALL,
    "flyball": BattedBallType.FLY_BALL,
    "fly ball": BattedBallType.FLY_BALL,
    "pu": BattedBallType.FLY_BALL,
    "pop": BattedBallType.FLY_BALL,
    "popup": BattedBallType.FLY_BALL,
    "pop up": BattedBallType.FLY_BALL,
}

_NULL_IDS = frozenset({"", "n/a", "na", "null", "undefined", "none", "nan"})

_KINEMATIC_FIELDS = (
    "time",
    "time_from_max_hand",
    "pelvis_rot",
    "torso_rot",
    "left_knee",
    "right_knee",
    "left_elbow",
    "right_elbow",
)
_ENERGY_FIELDS = ("time", "time_from_max_hand", "legs_ke", "torso_ke", "arms_ke", "bat_ke", "total_ke")
_ARM_SIDES = ("larm_ke", "rarm_ke")


def batted_ball_type_from_label(label: str) -> BattedBallType | None:
    return HIT_TYPE_LABELS.get(normalize_header(label))


def batted_ball_type_from_angle(launch_angle: float, session: SessionSettings | None = None) -> BattedBallType:
    """Below the ground-ball angle is a grounder, above the fly-ball angle a fly, otherwise a liner."""
    session = session or SessionSettings()
    if launch_angle < session.ground_ball_max_la:
        return BattedBallType.GROUND_BALL
    if launch_angle > session.fly_ball_min_la:
        return BattedBallType.FLY_BALL
    return BattedBallType.LINE_DRIVE


def normalize_swings(
    table: RawTable,
    column_map: Mapping[str, str],
    *,
    session: SessionSettings | None = None,
) -> NormalizedSwings:
    """Turn launch-monitor rows into ``SwingRecord`` values.

    Exit velocity decides the outcome: empty, missing-marker or zero means a
    miss, and a positive value means contact. A miss or foul result label
    overrides that. Rows whose exit velocity is non-numeric or negative are
    dropped and reported as ``RowRejection`` values.
    """
    swings, rejections = partition(
        _swing_from_row(index, row, column_map, session) for index, row in enumerate(table.rows)
    )
    if rejections:
        logger.warning("Dropped %d of %d launch-monitor rows with unreadable exit velocity", len(rejections), len(table))
    return NormalizedSwings(swings=tuple(swings), dropped_rows=len(rejections), rejections=tuple(rejections))


def _cell(row: Mapping[str, str], column_map: Mapping[str, str], field: str) -> str:
    header = column_map.get(field)
    if header is None:
        return ""
    return (row.get(header) or "").strip()


def _swing_from_row(
    index: int,
    row: Mapping[str, str],
    column_map: Mapping[str, str],
    session: SessionSettings | None,
) -> Result[SwingRecord, RowRejection]:
    raw_ev = _cell(row, column_map, "exit_velo")
    exit_velo: float | None = None
    match parse_number(raw_ev):
        case Ok(value):
            if value < 0:
                return Err(RowRejection(index, "exit_velo", raw_ev, "negative exit velocity"))
            exit_velo = value if value > 0 else None
        case Err(rejection) if rejection.reason not in ("empty", "missing"):
            return Err(RowRejection(index, "exit_velo", raw_ev, rejection.reason))

    result_label = _cell(row, column_map, "result")
    hit_type_label = _cell(row, column_map, "hit_type")
    user = _cell(row, column_map, "user")
    label = normalize_header(result_label)

    if label in MISS_LABELS or (exit_velo is None and label not in FOUL_LABELS):
        return Ok(SwingRecord(outcome=Outcome.MISS, result_label=result_label, hit_type_label=hit_type_label, user=user))

    launch_angle = parse_optional(_cell(row, column_map, "launch_angle"))
    distance = parse_optional(_cell(row, column_map, "distance"))
    spray_angle = parse_optional(_cell(row, column_map, "spray_angle"))

    if label in FOUL_LABELS:
        return Ok(
            SwingRecord(
                outcome=Outcome.FOUL,
                exit_velo=exit_velo,
                launch_angle=launch_angle,
                distance=distance,
                result_label=result_label,
                hit_type_label=hit_type_label,
                spray_angle=spray_angle,
                user=user,
            )
        )

    batted_ball_type = batted_ball_type_from_label(hit_type_label) if hit_type_label else None
    if batted_ball_type is None and launch_angle is not None:
        batted_ball_type = batted_ball_type_from_angle(launch_angle, session)
    return Ok(
        SwingRecord(
            outcome=Outcome.BALL_IN_PLAY,
            exit_velo=exit_velo,
            launch_angle=launch_angle,
            distance=distance,
            batted_ball_type=batted_ball_type,
            result_label=result_label,
            hit_type_label=hit_type_label,
            spray_angle=spray_angle,
            user=user,
        )
    )


def normalize_frames(table: RawTable, detection: DetectionResult) -> FrameSet:
    """Turn motion-capture rows into ``KinematicFrame`` or ``EnergyFrame`` values.

    Unparseable numeric cells become ``None``. Rows where every recognised
    numeric field is unparseable are dropped and counted. Unmapped columns
    are kept per frame in ``extras``.

    Raises:
        SchemaError: when ``detection`` is not a kinematics or energy-transfer result.
    """
    kind = detection.schema_kind
    if kind is SchemaKind.KINEMATICS:
        numeric_fields = _KINEMATIC_FIELDS
    elif kind is SchemaKind.ENERGY_TRANSFER:
        numeric_fields = (*_ENERGY_FIELDS, *_ARM_SIDES)
    else:
        raise SchemaError(f"normalize_frames cannot read {kind} tables")

    column_map = detection.column_map
    mapped_headers = set(column_map.values())
    frames: list[Frame] = []
    dropped = 0
    for row in table.rows:
        values = {name: parse_optional(_cell(row, column_map, name)) for name in numeric_fields}
        if all(v is None for v in values.values()):
            dropped += 1
            continue
        movement_id = _movement_id(_cell(row, column_map, "movement_id"))
        extras = {h: v for h, v in row.items() if h not in mapped_headers}
        if kind is SchemaKind.KINEMATICS:
            frames.append(KinematicFrame(movement_id=movement_id, extras=extras, **values))
        else:
            frames.append(_energy_frame(movement_id, values, extras))

    if dropped:
        logger.warning("Dropped %d of %d %s rows with no readable values", dropped, len(table), kind)
    logger.debug("Normalized %d %s frames", len(frames), kind)
    return FrameSet(kind=kind, frames=tuple(frames), dropped_rows=dropped)


def _movement_id(raw: str) -> str | None:
    return None if raw.lower() in _NULL_IDS else raw


def _energy_frame(movement_id: str | None, values: dict[str, float | None], extras: dict[str, str]) -> EnergyFrame:
    arms_ke = values["arms_ke"]
    sides = [v for side in _ARM_SIDES if (v := values[side]) is not None]
    if arms_ke is None and sides:
        arms_ke = sum(sides)
    return EnergyFrame(
        movement_id=movement_id,
        time=values["time"],
        time_from_max_hand=values["time_from_max_hand"],
        legs_ke=values["legs_ke"],
        torso_ke=values["torso_ke"],
        arms_ke=arms_ke,
        bat_ke=values["bat_ke"],
        total_ke=values["total_ke"],
        extras=extras,
    )
