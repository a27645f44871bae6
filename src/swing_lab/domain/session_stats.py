from dataclasses import dataclass, field

from swing_lab.domain.detection import Brand


@dataclass(frozen=True)
class LaDistribution:
    ground_ball: int = 0
    line_drive: int = 0
    fly_ball: int = 0
    pop_up: int = 0
    ground_ball_pct: float | None = None
    line_drive_pct: float | None = None
    fly_ball_pct: float | None = None
    pop_up_pct: float | None = None


@dataclass(frozen=True)
class SessionStats:
    """Launch-monitor session aggregate.

    Rates, means and the ball score are ``None`` when there is nothing to
    compute them over (never NaN).
    """

    source: Brand
    level: str
    total_swings: int = 0
    misses: int = 0
    fouls: int = 0
    balls_in_play: int = 0
    contact_rate: float | None = None
    foul_rate: float | None = None
    in_play_rate: float | None = None

    avg_exit_velo: float | None = None
    max_exit_velo: float | None = None
    min_exit_velo: float | None = None
    exit_velo_std: float | None = None
    exit_velo_p50: float | None = None
    exit_velo_p90: float | None = None
    velo_90_plus: int = 0
    velo_95_plus: int = 0
    velo_100_plus: int = 0

    avg_launch_angle: float | None = None
    optimal_la_count: int = 0
    optimal_la_pct: float | None = None
    ground_ball_count: int = 0
    line_drive_count: int = 0
    fly_ball_count: int = 0
    ground_ball_pct: float | None = None
    fly_ball_pct: float | None = None
    la_distribution: LaDistribution = field(default_factory=LaDistribution)

    avg_distance: float | None = None
    max_distance: float | None = None

    hard_hit_count: int = 0
    hard_hit_pct: float | None = None
    quality_hits: int = 0
    quality_hit_pct: float | None = None
    barrel_hits: int = 0
    barrel_pct: float | None = None
    pull_pct: float | None = None

    total_points: float = 0.0
    points_per_swing: float | None = None
    ball_score: float | None = None

    results_breakdown: dict[str, int] = field(default_factory=dict)
    hit_types_breakdown: dict[str, int] = field(default_factory=dict)
