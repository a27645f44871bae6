from swing_lab.domain.detection import Brand
from swing_lab.domain.table import RawTable
from swing_lab.ingest.classifier import classify
from swing_lab.ingest.normalizer import normalize_swings
from swing_lab.services.export import scores_to_record, session_to_record
from swing_lab.services.scoring import score
from swing_lab.services.session_aggregator import aggregate
from tests.helpers import matched_swing

DISCIPLINE = {"k_rate": 15.0, "walk_rate": 12.0, "chase_rate": 20.0, "contact_rate": 88.0, "discipline_ratio": 0.8}


class TestScoresToRecord:
    def test_partial_scores(self) -> None:
        record = scores_to_record(score(raw_metrics=DISCIPLINE))
        assert record["brain_score"] == 90.0
        assert record["brain_metric_set"] == "primary"
        assert record["body_score"] is None
        assert record["composite"] is None
        assert record["grade"] is None
        assert record["weakest_category"] == "brain"
        assert record["motor_profile"] == "spinner"
        assert record["leak_type"] == "unknown"
        assert record["leak_caption"] is None
        assert record["metric_k_rate"] == 15.0
        assert record["consistency_valid"] is False
        assert isinstance(record["warnings"], list) and record["warnings"]
        assert not any(key.startswith("kinetic_potential_") for key in record)
        assert not any(key.startswith("projection_") for key in record)

    def test_full_scores_are_flat(self) -> None:
        swings = [matched_swing(f"m{i}") for i in range(3)]
        record = scores_to_record(score(swings, raw_metrics=DISCIPLINE, weight_lbs=180.0, height_inches=70.0))
        assert isinstance(record["grade"], str)
        assert record["kinetic_potential_height_inches"] == 70.0
        assert "kinetic_potential_warnings" not in record
        assert record["cv_total_ke"] == 0.0
        assert record["swing_count"] == 3
        for value in record.values():
            assert not isinstance(value, dict)

    def test_sub_scores_are_flattened(self) -> None:
        record = scores_to_record(score(raw_metrics=DISCIPLINE))
        assert record["brain_grade"] == "Plus-Plus"
        assert record["brain_k_rate_raw"] == 15.0
        assert record["brain_k_rate_score"] == 90.0
        assert record["brain_k_rate_weight"] == 0.25
        for key in ("k_rate", "walk_rate", "chase_rate", "contact_rate", "discipline_ratio"):
            assert f"brain_{key}_score" in record
        assert "body_pelvis_velocity_score" not in record
        assert record["motor_profile_points_spinner"] == 0

    def test_profile_points_and_projections(self) -> None:
        swings = [matched_swing(f"m{i}") for i in range(3)]
        result = score(swings, raw_metrics=DISCIPLINE, level="pro")
        record = scores_to_record(result)
        for label, points in result.motor_profile.points.items():
            assert record[f"motor_profile_points_{label}"] == points
        assert record["projection_level"] == "pro"
        assert record["projection_bat_speed_current_mph"] == 95.0
        assert record["projection_used_bat_ke"] is True


class TestSessionToRecord:
    def test_flattens_nested_fields(self, hittrax_table: RawTable) -> None:
        detection = classify(hittrax_table.headers)
        stats = aggregate(normalize_swings(hittrax_table, detection.column_map).swings, Brand.HITTRAX)
        record = session_to_record(stats)
        assert record["source"] == "hittrax"
        assert record["total_swings"] == 3
        assert record["contact_rate"] == 66.7
        assert record["la_ground_ball"] == 1
        assert record["la_line_drive_pct"] == 50.0
        assert record["results_homerun"] == 1
        assert record["results_miss"] == 1
        assert record["hit_types_line_drive"] == 1
        assert "la_distribution" not in record
        assert "results_breakdown" not in record

    def test_empty_session(self) -> None:
        record = session_to_record(aggregate([], Brand.GENERIC))
        assert record["source"] == "generic"
        assert record["contact_rate"] is None
