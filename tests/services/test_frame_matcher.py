import pytest

from swing_lab.domain.frames import EnergyFrame, KinematicFrame, Pairing
from swing_lab.services.frame_matcher import group_movements, match


def _ik(movement_id: str | None, times: tuple[float, ...] = (0.0, 0.01, 0.02)) -> list[KinematicFrame]:
    return [KinematicFrame(movement_id=movement_id, time=t, pelvis_rot=0.1, torso_rot=0.2) for t in times]


def _me(movement_id: str | None, times: tuple[float, ...] = (0.0, 0.01, 0.02)) -> list[EnergyFrame]:
    return [EnergyFrame(movement_id=movement_id, time=t, total_ke=100.0) for t in times]


def _ik_stream(ids: list[str | None]) -> list[KinematicFrame]:
    return [f for movement_id in ids for f in _ik(movement_id)]


def _me_stream(ids: list[str | None]) -> list[EnergyFrame]:
    return [f for movement_id in ids for f in _me(movement_id)]


class TestGroupMovements:
    def test_by_time_reset(self) -> None:
        groups = group_movements(_ik_stream([None, None, None]))
        assert [g.key for g in groups] == ["swing-1", "swing-2", "swing-3"]
        assert all(len(g.frames) == 3 for g in groups)
        assert not groups[0].has_movement_id

    def test_by_movement_id_in_file_order(self) -> None:
        groups = group_movements(_ik_stream(["b", "a"]))
        assert [g.key for g in groups] == ["b", "a"]

    def test_id_less_frames_join_previous_movement(self) -> None:
        frames = [*_ik("a"), *_ik(None, (0.03,)), *_ik("b")]
        groups = group_movements(frames)
        assert [len(g.frames) for g in groups] == [4, 3]

    def test_empty(self) -> None:
        assert group_movements([]) == []


class TestMatch:
    def test_positional_count_mismatch(self) -> None:
        result = match(_ik_stream([None] * 10), _me_stream([None] * 7))
        assert len(result.records) == 7
        assert result.pairing is Pairing.POSITIONAL
        assert len(result.warnings) == 1
        assert "7 of 10" in result.warnings[0]
        assert "kinematics=10" in result.warnings[0]
        assert "energy=7" in result.warnings[0]

    def test_shared_ids_pair_in_energy_order(self) -> None:
        result = match(_ik_stream(["m1", "m2", "m3"]), _me_stream(["m3", "m1"]))
        assert result.pairing is Pairing.MOVEMENT_ID
        assert [r.movement_id for r in result.records] == ["m3", "m1"]
        assert all(r.has_kinematics and r.has_energy for r in result.records)
        assert "2 of 3" in result.warnings[0]

    def test_id_match_with_ten_and_seven(self) -> None:
        ik_ids: list[str | None] = [f"m{i}" for i in range(10)]
        me_ids: list[str | None] = [f"m{i}" for i in range(7)]
        result = match(_ik_stream(ik_ids), _me_stream(me_ids))
        assert len(result.records) == 7
        assert "7 of 10" in result.warnings[0]

    def test_disjoint_ids_fall_back_to_position(self) -> None:
        result = match(_ik_stream(["a", "b"]), _me_stream(["x", "y"]))
        assert result.pairing is Pairing.POSITIONAL
        assert [r.movement_id for r in result.records] == ["x", "y"]
        assert result.warnings == ()

    def test_equal_counts_have_no_warning(self) -> None:
        result = match(_ik_stream([None] * 3), _me_stream([None] * 3))
        assert result.warnings == ()
        assert [r.movement_id for r in result.records] == ["swing-1", "swing-2", "swing-3"]

    def test_missing_energy_side(self) -> None:
        result = match(_ik_stream(["a", "b"]), [])
        assert result.pairing is Pairing.SINGLE_SIDE
        assert len(result.records) == 2
        assert all(r.has_kinematics and not r.has_energy for r in result.records)
        assert "energy" in result.warnings[0].lower()

    def test_missing_kinematics_side(self) -> None:
        result = match([], _me_stream(["a"]))
        assert result.pairing is Pairing.SINGLE_SIDE
        assert result.records[0].has_energy
        assert not result.records[0].has_kinematics

    def test_movement_ids_unique(self) -> None:
        result = match(_ik_stream(["a", "b", "a"]), _me_stream(["a", "b"]))
        ids = [r.movement_id for r in result.records]
        assert len(ids) == len(set(ids))

    @pytest.mark.parametrize(
        ("ik", "me"),
        [
            ((), []),
            ([], None),
            ("frames", []),
        ],
    )
    def test_non_list_arguments_raise(self, ik: object, me: object) -> None:
        with pytest.raises(TypeError):
            match(ik, me)  # type: ignore[arg-type]
