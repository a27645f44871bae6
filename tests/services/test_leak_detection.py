from swing_lab.domain.metrics import SwingMetrics
from swing_lab.domain.scores import LeakType
from swing_lab.services.leak_detection import LEAK_MESSAGES, detect_leak
from tests.helpers import energy_swing


class TestDetectLeak:
    def test_no_energy_swings(self) -> None:
        diagnosis = detect_leak([SwingMetrics(movement_id="m1", pelvis_velocity=600.0)])
        assert diagnosis.leak_type is LeakType.UNKNOWN
        assert diagnosis.caption == ""

    def test_clean_transfer(self) -> None:
        diagnosis = detect_leak([energy_swing(str(i)) for i in range(3)])
        assert diagnosis.leak_type is LeakType.CLEAN_TRANSFER
        assert (diagnosis.caption, diagnosis.training) == LEAK_MESSAGES[LeakType.CLEAN_TRANSFER]

    def test_no_bat_delivery(self) -> None:
        swings = [energy_swing("a", bat_ke=4.0), energy_swing("b", bat_ke=6.0), energy_swing("c")]
        assert detect_leak(swings).leak_type is LeakType.NO_BAT_DELIVERY

    def test_untracked_bat_is_not_a_delivery_leak(self) -> None:
        swings = [energy_swing(str(i), bat_ke=None, bat_efficiency=None, has_bat_ke=False) for i in range(3)]
        assert detect_leak(swings).leak_type is LeakType.UNKNOWN

    def test_late_legs(self) -> None:
        swings = [energy_swing(str(i), legs_peak_ms=150.0, arms_peak_ms=100.0) for i in range(3)]
        assert detect_leak(swings).leak_type is LeakType.LATE_LEGS

    def test_torso_bypass(self) -> None:
        swings = [energy_swing(str(i), torso_to_arms_transfer_pct=40.0) for i in range(3)]
        assert detect_leak(swings).leak_type is LeakType.TORSO_BYPASS

    def test_early_arms(self) -> None:
        swings = [energy_swing(str(i), proper_sequence=False) for i in range(3)]
        assert detect_leak(swings).leak_type is LeakType.EARLY_ARMS

    def test_checks_run_in_order(self) -> None:
        swings = [
            energy_swing(
                str(i), bat_ke=2.0, legs_peak_ms=150.0, torso_to_arms_transfer_pct=40.0, proper_sequence=False
            )
            for i in range(3)
        ]
        assert detect_leak(swings).leak_type is LeakType.NO_BAT_DELIVERY

    def test_low_bat_efficiency_is_unknown(self) -> None:
        swings = [energy_swing(str(i), bat_efficiency=20.0) for i in range(3)]
        assert detect_leak(swings).leak_type is LeakType.UNKNOWN

    def test_early_arms_reads_kinematic_sequence(self) -> None:
        swings = [energy_swing(str(i), legs_peak_ms=50.0, arms_peak_ms=100.0, proper_sequence=False) for i in range(3)]
        assert detect_leak(swings).leak_type is LeakType.EARLY_ARMS

    def test_early_arms_skipped_without_kinematics(self) -> None:
        swings = [energy_swing(str(i), proper_sequence=None) for i in range(3)]
        assert detect_leak(swings).leak_type is LeakType.CLEAN_TRANSFER
