import logging
from collections.abc import Sequence
from dataclasses import dataclass

from swing_lab.domain.detection import Confidence, DetectionResult, SchemaKind
from swing_lab.ingest.signatures import (
    GENERIC_SIGNATURE,
    SIGNATURES,
    SchemaSignature,
    normalize_header,
    token_in_header,
)

logger = logging.getLogger(__name__)

_DEBUG_HEADER_LIMIT = 10
_REQUIRED_GROUP_WEIGHT = 10


@dataclass(frozen=True)
class _Match:
    signature: SchemaSignature
    required_hits: int
    optional_hits: int
    forbidden_hit: bool

    @property
    def score(self) -> int:
        return _REQUIRED_GROUP_WEIGHT * self.required_hits + self.optional_hits

    @property
    def is_winner(self) -> bool:
        return self.required_hits == len(self.signature.required) and not self.forbidden_hit


def classify(headers: Sequence[str], filename_hint: str | None = None) -> DetectionResult:
    """Detect the export format of a table from its header row.

    Every signature in ``SIGNATURES`` is scored against the normalized
    headers. A single winner is reported with high confidence. Several
    winners are narrowed by discarding the generic launch-monitor fallback,
    then by the filename hint, then by optional-token count, then by table
    order, and reported with medium confidence. No winner yields
    ``SchemaKind.UNKNOWN`` with the first headers kept for diagnosis.

    The filename is only ever a tie-breaker; it never makes a signature win.
    """
    normalized = [normalize_header(h) for h in headers]
    normalized = [h for h in normalized if h]
    matches = [_score(signature, normalized) for signature in SIGNATURES]
    winners = [m for m in matches if m.is_winner]

    if not winners:
        best = max(matches, key=lambda m: m.score)
        logger.info(
            "Unrecognized format for %s; best partial match %s (score %d)",
            filename_hint or "<unnamed>",
            best.signature.name,
            best.score,
        )
        return DetectionResult(
            schema_kind=SchemaKind.UNKNOWN,
            confidence=Confidence.LOW,
            debug_headers=tuple(headers[:_DEBUG_HEADER_LIMIT]),
        )

    winners = _drop_generic_fallback(winners)
    if len(winners) == 1:
        return _result(winners[0].signature, headers, Confidence.HIGH)

    chosen = _break_tie(winners, filename_hint)
    logger.info(
        "Ambiguous format for %s: %s; chose %s",
        filename_hint or "<unnamed>",
        ", ".join(m.signature.name for m in winners),
        chosen.signature.name,
    )
    return _result(chosen.signature, headers, Confidence.MEDIUM)


def build_column_map(signature: SchemaSignature, headers: Sequence[str]) -> dict[str, str]:
    """Map each canonical field to the first source header matching one of its aliases.

    Exact header matches are preferred over containment, and a source
    header is claimed by at most one canonical field.
    """
    normalized = [(h, normalize_header(h)) for h in headers]
    claimed: set[str] = set()
    column_map: dict[str, str] = {}
    for field_name, aliases in signature.columns:
        found = _find_header(normalized, aliases, claimed)
        if found is not None:
            column_map[field_name] = found
            claimed.add(found)
    return column_map


def _score(signature: SchemaSignature, headers: list[str]) -> _Match:
    def present(token: str) -> bool:
        return any(token_in_header(token, h) for h in headers)

    return _Match(
        signature=signature,
        required_hits=sum(1 for group in signature.required if any(present(t) for t in group)),
        optional_hits=sum(1 for t in signature.optional if present(t)),
        forbidden_hit=any(present(t) for t in signature.forbidden),
    )


def _drop_generic_fallback(winners: list[_Match]) -> list[_Match]:
    all_launch_monitor = all(m.signature.schema_kind is SchemaKind.LAUNCH_MONITOR for m in winners)
    if not all_launch_monitor or len(winners) < 2:
        return winners
    return [m for m in winners if m.signature.name != GENERIC_SIGNATURE]


def _break_tie(winners: list[_Match], filename_hint: str | None) -> _Match:
    candidates = winners
    if filename_hint:
        name = normalize_header(filename_hint)
        hinted = [m for m in candidates if any(token_in_header(t, name) for t in m.signature.filename_tokens)]
        if hinted:
            candidates = hinted
    top_optional = max(m.optional_hits for m in candidates)
    # Candidates keep SIGNATURES order, so the first hit is the table-order winner.
    return next(m for m in candidates if m.optional_hits == top_optional)


def _find_header(
    headers: list[tuple[str, str]],
    aliases: tuple[str, ...],
    claimed: set[str],
) -> str | None:
    available = [(raw, norm) for raw, norm in headers if raw not in claimed]
    for alias in aliases:
        for raw, norm in available:
            if norm == alias:
                return raw
    for alias in aliases:
        for raw, norm in available:
            if token_in_header(alias, norm):
                return raw
    return None


def _result(signature: SchemaSignature, headers: Sequence[str], confidence: Confidence) -> DetectionResult:
    logger.debug("Matched signature %s (%s)", signature.name, confidence)
    return DetectionResult(
        schema_kind=signature.schema_kind,
        confidence=confidence,
        brand=signature.brand,
        column_map=build_column_map(signature, headers),
        debug_headers=tuple(headers[:_DEBUG_HEADER_LIMIT]),
        matched_signature=signature.name,
    )
