import logging
from collections import Counter
from collections.abc import Sequence

import numpy as np

from swing_lab.domain.detection import Brand
from swing_lab.domain.session_stats import LaDistribution, SessionStats
from swing_lab.domain.settings import (
    DEFAULT_SETTINGS,
    LEVEL_THRESHOLDS,
    BallPointSettings,
    LevelThresholds,
    ScoringSettings,
    SessionSettings,
    resolve_level,
)
from swing_lab.domain.swing import BattedBallType, Outcome, SwingRecord

logger = logging.getLogger(__name__)


def aggregate(
    swings: Sequence[SwingRecord],
    brand: Brand,
    *,
    level: str | None = None,
    batting_side: str = "R",
    settings: ScoringSettings | None = None,
) -> SessionStats:
    """Aggregate one launch-monitor session into ``SessionStats``.

    Velocity, launch-angle and distance statistics are computed over balls in
    play only. Barrel and hard-hit thresholds follow the hitter's level
    (unknown or absent levels use the configured default). With no swings
    every count is zero and every rate, mean and score is ``None``.
    """
    settings = settings or DEFAULT_SETTINGS
    session = settings.session
    level_key = resolve_level(level, session.default_level)
    thresholds = LEVEL_THRESHOLDS[level_key]

    total = len(swings)
    if total == 0:
        return SessionStats(source=brand, level=level_key)

    misses = sum(1 for s in swings if s.outcome is Outcome.MISS)
    fouls = sum(1 for s in swings if s.outcome is Outcome.FOUL)
    in_play = [s for s in swings if s.outcome is Outcome.BALL_IN_PLAY]
    bip = len(in_play)

    velo = _velocity_stats(in_play, session)
    angles = [s.launch_angle for s in in_play if s.launch_angle is not None]
    optimal = sum(1 for la in angles if session.optimal_la_min <= la <= session.optimal_la_max)
    typed = Counter(s.batted_ball_type for s in in_play if s.batted_ball_type is not None)
    typed_total = sum(typed.values())
    distances = [s.distance for s in in_play if s.distance is not None]

    hard_hit = sum(1 for s in in_play if is_hard_hit(s, thresholds))
    quality = sum(1 for s in in_play if is_quality_hit(s, thresholds, session))
    barrels = sum(1 for s in in_play if is_barrel(s, thresholds))

    total_points = sum(swing_points(s, thresholds, session, settings.ball_points) for s in swings)
    points_per_swing = total_points / total

    stats = SessionStats(
        source=brand,
        level=level_key,
        total_swings=total,
        misses=misses,
        fouls=fouls,
        balls_in_play=bip,
        contact_rate=_pct(total - misses, total),
        foul_rate=_pct(fouls, total),
        in_play_rate=_pct(bip, total),
        **velo,
        avg_launch_angle=_mean(angles),
        optimal_la_count=optimal,
        optimal_la_pct=_pct(optimal, len(angles)),
        ground_ball_count=typed[BattedBallType.GROUND_BALL],
        line_drive_count=typed[BattedBallType.LINE_DRIVE],
        fly_ball_count=typed[BattedBallType.FLY_BALL],
        ground_ball_pct=_pct(typed[BattedBallType.GROUND_BALL], typed_total),
        fly_ball_pct=_pct(typed[BattedBallType.FLY_BALL], typed_total),
        la_distribution=la_distribution(angles, session),
        avg_distance=_mean(distances),
        max_distance=max(distances) if distances else None,
        hard_hit_count=hard_hit,
        hard_hit_pct=_pct(hard_hit, bip),
        quality_hits=quality,
        quality_hit_pct=_pct(quality, bip),
        barrel_hits=barrels,
        barrel_pct=_pct(barrels, bip),
        pull_pct=pull_percentage(in_play, batting_side),
        total_points=total_points,
        points_per_swing=round(points_per_swing, 2),
        ball_score=ball_score(points_per_swing, settings.ball_points),
        results_breakdown=dict(Counter(_result_key(s) for s in swings)),
        hit_types_breakdown=dict(Counter(_hit_type_key(s) for s in in_play)),
    )
    logger.debug(
        "Aggregated %d swings (%d in play) at level %s: ball score %s",
        total,
        bip,
        level_key,
        stats.ball_score,
    )
    return stats


def is_hard_hit(swing: SwingRecord, thresholds: LevelThresholds) -> bool:
    return swing.exit_velo is not None and swing.exit_velo >= thresholds.hard_hit_ev_min


def is_quality_hit(swing: SwingRecord, thresholds: LevelThresholds, session: SessionSettings) -> bool:
    """Hard-hit velocity inside the sweet-spot launch window."""
    la = swing.launch_angle
    return (
        is_hard_hit(swing, thresholds)
        and la is not None
        and session.sweet_spot_min_la <= la <= session.sweet_spot_max_la
    )


def is_barrel(swing: SwingRecord, thresholds: LevelThresholds) -> bool:
    ev, la = swing.exit_velo, swing.launch_angle
    if ev is None or la is None:
        return False
    return ev >= thresholds.barrel_ev_min and thresholds.barrel_la_min <= la <= thresholds.barrel_la_max


def swing_points(
    swing: SwingRecord,
    thresholds: LevelThresholds,
    session: SessionSettings,
    points: BallPointSettings,
) -> float:
    """Points for one swing: the highest tier it reaches."""
    if swing.outcome is Outcome.MISS:
        return points.miss
    if swing.outcome is Outcome.FOUL:
        return points.foul
    if is_barrel(swing, thresholds):
        return points.barrel
    if is_quality_hit(swing, thresholds, session):
        return points.quality
    return points.in_play


def ball_score(points_per_swing: float, points: BallPointSettings) -> float:
    """Map points-per-swing linearly from [floor, ceiling] onto [0, 100], clamped."""
    scaled = (points_per_swing - points.floor) / (points.ceiling - points.floor) * 100
    return round(min(100.0, max(0.0, scaled)), 1)


def la_distribution(angles: Sequence[float], session: SessionSettings) -> LaDistribution:
    low, mid, high = session.la_bucket_edges
    ground = sum(1 for la in angles if la < low)
    line = sum(1 for la in angles if low <= la < mid)
    fly = sum(1 for la in angles if mid <= la <= high)
    pop_up = sum(1 for la in angles if la > high)
    n = len(angles)
    return LaDistribution(
        ground_ball=ground,
        line_drive=line,
        fly_ball=fly,
        pop_up=pop_up,
        ground_ball_pct=_pct(ground, n),
        line_drive_pct=_pct(line, n),
        fly_ball_pct=_pct(fly, n),
        pop_up_pct=_pct(pop_up, n),
    )


def pull_percentage(in_play: Sequence[SwingRecord], batting_side: str) -> float | None:
    """Share of spray-tagged balls in play hit to the pull side.

    Negative spray angles are the pull side for right-handed hitters and the
    opposite field for left-handed hitters.
    """
    sprays = [s.spray_angle for s in in_play if s.spray_angle is not None]
    left_handed = batting_side.strip().upper().startswith("L")
    pulled = sum(1 for a in sprays if (a > 0 if left_handed else a < 0))
    return _pct(pulled, len(sprays))


def _velocity_stats(in_play: Sequence[SwingRecord], session: SessionSettings) -> dict[str, float | int | None]:
    evs = np.asarray([s.exit_velo for s in in_play if s.exit_velo is not None], dtype=np.float64)
    if evs.size == 0:
        return {}
    p50, p90 = np.percentile(evs, [50, 90])
    t90, t95, t100 = session.velo_thresholds
    return {
        "avg_exit_velo": round(float(np.mean(evs)), 1),
        "max_exit_velo": float(np.max(evs)),
        "min_exit_velo": float(np.min(evs)),
        "exit_velo_std": round(float(np.std(evs)), 2),
        "exit_velo_p50": round(float(p50), 1),
        "exit_velo_p90": round(float(p90), 1),
        "velo_90_plus": int(np.count_nonzero(evs >= t90)),
        "velo_95_plus": int(np.count_nonzero(evs >= t95)),
        "velo_100_plus": int(np.count_nonzero(evs >= t100)),
    }


def _result_key(swing: SwingRecord) -> str:
    if swing.result_label:
        return swing.result_label
    return "Miss" if swing.outcome is Outcome.MISS else "Unknown"


def _hit_type_key(swing: SwingRecord) -> str:
    return swing.batted_ball_type.value if swing.batted_ball_type is not None else "unknown"


def _pct(part: int, whole: int) -> float | None:
    if whole == 0:
        return None
    return round(part / whole * 100, 1)


def _mean(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return round(float(np.mean(values)), 1)
