from collections.abc import Mapping

from swing_lab.domain.scores import ScoreComponents, SubScore
from swing_lab.domain.settings import CategorySpec, Direction, MetricSource, SubMetricSpec


def score_band(value: float, spec: SubMetricSpec) -> float:
    """Map a raw metric onto 0-100 through the sub-metric's step bands.

    Band thresholds are inclusive: with ``Direction.LOWER`` a value equal to
    a threshold earns that band, and likewise with ``Direction.HIGHER``.
    """
    if spec.direction is Direction.HIGHER:
        for band in sorted(spec.bands, key=lambda b: b.threshold, reverse=True):
            if value >= band.threshold:
                return band.score
    else:
        for band in sorted(spec.bands, key=lambda b: b.threshold):
            if value <= band.threshold:
                return band.score
    return spec.floor


def available_sources(specs: tuple[CategorySpec, ...], metrics: Mapping[str, float | None]) -> frozenset[MetricSource]:
    """Sources with at least one of their metrics present."""
    return frozenset(
        m.source
        for spec in specs
        for m in (*spec.metrics, *spec.fallback)
        if metrics.get(m.key) is not None
    )


def score_category(
    spec: CategorySpec,
    metrics: Mapping[str, float | None],
    sources: frozenset[MetricSource] | None = None,
) -> ScoreComponents | None:
    """Weighted step-function score for one category.

    Missing sub-metrics are skipped and the remaining weights renormalized.
    The fallback metric set is used only when no primary sub-metric is
    present. Returns ``None`` when the category's required sources are not
    all in ``sources`` or when no sub-metric at all is present.
    """
    if sources is not None and not spec.requires <= sources:
        return None

    metric_set = "primary"
    present = _present(spec.metrics, metrics)
    if not present and spec.fallback:
        metric_set = "fallback"
        present = _present(spec.fallback, metrics)
    if not present:
        return None

    total_weight = sum(m.weight for m, _ in present)
    if total_weight <= 0:
        return None

    sub_scores: dict[str, SubScore] = {}
    weighted = 0.0
    for metric, value in present:
        band_score = score_band(value, metric)
        weight = metric.weight / total_weight
        sub_scores[metric.key] = SubScore(raw_value=value, score=band_score, weight=round(weight, 4))
        weighted += band_score * weight

    return ScoreComponents(
        category=spec.category,
        score=round(min(100.0, max(0.0, weighted)), 1),
        sub_scores=sub_scores,
        metric_set=metric_set,
    )


def _present(
    specs: tuple[SubMetricSpec, ...],
    metrics: Mapping[str, float | None],
) -> list[tuple[SubMetricSpec, float]]:
    return [(m, float(v)) for m in specs if (v := metrics.get(m.key)) is not None]
