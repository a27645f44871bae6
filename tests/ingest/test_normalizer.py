import pytest

from swing_lab.domain.detection import Confidence, DetectionResult, SchemaKind
from swing_lab.domain.errors import SchemaError
from swing_lab.domain.frames import EnergyFrame, KinematicFrame
from swing_lab.domain.swing import BattedBallType, Outcome
from swing_lab.domain.table import RawTable
from swing_lab.ingest.classifier import classify
from swing_lab.ingest.csv_reader import parse_table
from swing_lab.ingest.normalizer import (
    batted_ball_type_from_angle,
    batted_ball_type_from_label,
    normalize_frames,
    normalize_swings,
)

LM_MAP = {"exit_velo": "EV", "launch_angle": "LA", "distance": "Dist", "result": "Result", "hit_type": "Type"}


def _lm_table(*rows: tuple[str, str, str, str, str]) -> RawTable:
    headers = ("EV", "LA", "Dist", "Result", "Type")
    return RawTable(headers=headers, rows=tuple(dict(zip(headers, row)) for row in rows))


class TestNormalizeSwings:
    def test_scenario_rows(self, hittrax_table: RawTable) -> None:
        detection = classify(hittrax_table.headers)
        result = normalize_swings(hittrax_table, detection.column_map)
        outcomes = [s.outcome for s in result.swings]
        assert outcomes == [Outcome.BALL_IN_PLAY, Outcome.BALL_IN_PLAY, Outcome.MISS]
        home_run, ground_out, miss = result.swings
        assert home_run.exit_velo == 92.0
        assert home_run.batted_ball_type is BattedBallType.LINE_DRIVE
        assert ground_out.batted_ball_type is BattedBallType.GROUND_BALL
        assert miss.exit_velo is None
        assert miss.launch_angle is None
        assert result.dropped_rows == 0

    def test_empty_velocity_is_miss(self) -> None:
        result = normalize_swings(_lm_table(("", "", "", "", "")), LM_MAP)
        assert result.swings[0].outcome is Outcome.MISS

    def test_missing_marker_velocity_is_miss(self) -> None:
        result = normalize_swings(_lm_table(("n/a", "", "", "", "")), LM_MAP)
        assert result.swings[0].outcome is Outcome.MISS

    def test_miss_label_overrides_velocity(self) -> None:
        result = normalize_swings(_lm_table(("75", "20", "100", "Swinging Strike", "")), LM_MAP)
        swing = result.swings[0]
        assert swing.outcome is Outcome.MISS
        assert swing.exit_velo is None
        assert swing.result_label == "Swinging Strike"

    def test_foul_label(self) -> None:
        result = normalize_swings(_lm_table(("81", "40", "120", "Foul", "FB")), LM_MAP)
        swing = result.swings[0]
        assert swing.outcome is Outcome.FOUL
        assert swing.exit_velo == 81.0
        assert swing.batted_ball_type is None

    def test_foul_without_velocity(self) -> None:
        result = normalize_swings(_lm_table(("", "", "", "foul ball", "")), LM_MAP)
        assert result.swings[0].outcome is Outcome.FOUL

    def test_hit_type_label_beats_angle(self) -> None:
        result = normalize_swings(_lm_table(("88", "5", "200", "Single", "LD")), LM_MAP)
        assert result.swings[0].batted_ball_type is BattedBallType.LINE_DRIVE

    def test_unreadable_velocity_rejected(self) -> None:
        result = normalize_swings(
            _lm_table(("fast", "10", "", "", ""), ("-4", "10", "", "", ""), ("90", "12", "", "", "")),
            LM_MAP,
        )
        assert len(result.swings) == 1
        assert result.dropped_rows == 2
        first, second = result.rejections
        assert (first.row_index, first.field, first.raw, first.reason) == (0, "exit_velo", "fast", "not a number")
        assert second.row_index == 1
        assert second.reason == "negative exit velocity"

    def test_thousands_separator_in_distance(self) -> None:
        result = normalize_swings(_lm_table(("101", "28", "1,002", "HR", "")), LM_MAP)
        assert result.swings[0].distance == 1002.0


class TestBattedBallType:
    @pytest.mark.parametrize(
        ("angle", "expected"),
        [
            (9.9, BattedBallType.GROUND_BALL),
            (10.0, BattedBallType.LINE_DRIVE),
            (25.0, BattedBallType.LINE_DRIVE),
            (25.1, BattedBallType.FLY_BALL),
        ],
    )
    def test_from_angle(self, angle: float, expected: BattedBallType) -> None:
        assert batted_ball_type_from_angle(angle) is expected

    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("GB", BattedBallType.GROUND_BALL),
            ("Line Drive", BattedBallType.LINE_DRIVE),
            ("PU", BattedBallType.FLY_BALL),
            ("pop-up", BattedBallType.FLY_BALL),
            ("bunt", None),
        ],
    )
    def test_from_label(self, label: str, expected: BattedBallType | None) -> None:
        assert batted_ball_type_from_label(label) is expected


class TestNormalizeFrames:
    def test_kinematic_frames(self) -> None:
        table = parse_table(
            "org_movement_id,time,time_from_max_hand,pelvis_rot,torso_rot,left_knee,right_knee,"
            "left_elbow,right_elbow,pelvis_tilt\n"
            "swing-a,0.0,-0.2,0.1,0.2,0.5,0.4,1.2,1.1,0.05\n"
            "n/a,0.01,-0.19,0.15,0.25,0.5,0.4,1.2,1.1,0.06\n"
        )
        frames = normalize_frames(table, classify(table.headers))
        assert frames.kind is SchemaKind.KINEMATICS
        first, second = frames.frames
        assert isinstance(first, KinematicFrame)
        assert first.movement_id == "swing-a"
        assert first.pelvis_rot == 0.1
        assert first.extras == {"pelvis_tilt": "0.05"}
        assert second.movement_id is None

    def test_energy_arms_fall_back_to_sides(self) -> None:
        table = parse_table(
            "time,legs_kinetic_energy,torso_kinetic_energy,larm_kinetic_energy,rarm_kinetic_energy,"
            "total_kinetic_energy\n"
            "0.0,100,80,30,25,300\n"
        )
        frames = normalize_frames(table, classify(table.headers))
        frame = frames.frames[0]
        assert isinstance(frame, EnergyFrame)
        assert frame.arms_ke == 55.0
        assert frame.bat_ke is None

    def test_unreadable_rows_dropped(self) -> None:
        table = parse_table(
            "time,legs_kinetic_energy,total_kinetic_energy\n0.0,100,300\nx,bad,nan\n0.02,abc,310\n"
        )
        frames = normalize_frames(table, classify(table.headers))
        assert len(frames.frames) == 2
        assert frames.dropped_rows == 1
        assert frames.frames[1].legs_ke is None  # type: ignore[union-attr]

    def test_launch_monitor_detection_rejected(self, hittrax_table: RawTable) -> None:
        with pytest.raises(SchemaError):
            normalize_frames(hittrax_table, classify(hittrax_table.headers))

    def test_unknown_detection_rejected(self) -> None:
        detection = DetectionResult(schema_kind=SchemaKind.UNKNOWN, confidence=Confidence.LOW)
        with pytest.raises(SchemaError):
            normalize_frames(RawTable(headers=(), rows=()), detection)
