"""Batch orchestration: classify and normalize each uploaded file, then score the lot.

The per-file step runs in a thread pool; combining happens only after every
file has finished, in upload order, so a batch always produces the same
result for the same inputs.
"""

import logging
import os
import time
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from swing_lab.domain.detection import Brand, DetectionResult, SchemaKind
from swing_lab.domain.frames import EnergyFrame, FrameSet, KinematicFrame, MatchResult
from swing_lab.domain.scores import RebootScores
from swing_lab.domain.session_stats import SessionStats
from swing_lab.domain.settings import DEFAULT_SETTINGS, ScoringSettings
from swing_lab.domain.swing import NormalizedSwings, SwingRecord
from swing_lab.ingest.classifier import classify
from swing_lab.ingest.csv_reader import parse_table
from swing_lab.ingest.normalizer import normalize_frames, normalize_swings
from swing_lab.services import frame_matcher
from swing_lab.services.scoring import score
from swing_lab.services.session_aggregator import aggregate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    text: str


@dataclass(frozen=True)
class PlayerContext:
    """Optional facts about the hitter. Every field may be left out."""

    weight_lbs: float | None = None
    height_inches: float | None = None
    dominant_hand: str | None = None
    level: str | None = None
    raw_metrics: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ProcessedFile:
    filename: str
    detection: DetectionResult
    swings: NormalizedSwings | None = None
    frames: FrameSet | None = None

    @property
    def dropped_rows(self) -> int:
        if self.swings is not None:
            return self.swings.dropped_rows
        if self.frames is not None:
            return self.frames.dropped_rows
        return 0


@dataclass(frozen=True)
class BatchResult:
    files: tuple[ProcessedFile, ...]
    scores: RebootScores
    session: SessionStats | None = None
    match_result: MatchResult | None = None
    unknown_files: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def process_file(upload: UploadedFile, *, settings: ScoringSettings | None = None) -> ProcessedFile:
    """Classify one file and normalize its rows for the detected schema.

    Unknown files come back with only their detection result.
    """
    settings = settings or DEFAULT_SETTINGS
    table = parse_table(upload.text)
    detection = classify(table.headers, filename_hint=upload.filename)
    logger.debug(
        "%s: %s (%s, %s) with %d rows",
        upload.filename,
        detection.schema_kind,
        detection.matched_signature,
        detection.confidence,
        len(table),
    )
    match detection.schema_kind:
        case SchemaKind.LAUNCH_MONITOR:
            swings = normalize_swings(table, detection.column_map, session=settings.session)
            return ProcessedFile(upload.filename, detection, swings=swings)
        case SchemaKind.KINEMATICS | SchemaKind.ENERGY_TRANSFER:
            return ProcessedFile(upload.filename, detection, frames=normalize_frames(table, detection))
        case _:
            logger.warning("%s: unrecognised format; headers %s", upload.filename, list(detection.debug_headers))
            return ProcessedFile(upload.filename, detection)


def process_files(
    uploads: Sequence[UploadedFile],
    *,
    settings: ScoringSettings | None = None,
    max_workers: int | None = None,
) -> list[ProcessedFile]:
    """Run ``process_file`` over every upload, concurrently when there is more than one."""
    if not uploads:
        return []
    effective_workers = min(max_workers or os.cpu_count() or 1, len(uploads))
    logger.info("Processing %d files with %d workers", len(uploads), effective_workers)
    t0 = time.perf_counter()

    if effective_workers <= 1:
        processed = [process_file(u, settings=settings) for u in uploads]
    else:
        with ThreadPoolExecutor(max_workers=effective_workers) as executor:
            futures = [executor.submit(process_file, u, settings=settings) for u in uploads]
            processed = [f.result() for f in futures]

    logger.info("Processed %d files in %.2fs", len(processed), time.perf_counter() - t0)
    return processed


def run_batch(
    uploads: Sequence[UploadedFile],
    player: PlayerContext | None = None,
    *,
    settings: ScoringSettings | None = None,
    max_workers: int | None = None,
) -> BatchResult:
    """Score a batch of uploads for one hitter.

    Launch-monitor swings from every file are pooled into one session;
    kinematics and energy-transfer frames are pooled per side and matched.
    Unknown files are listed in ``unknown_files`` and otherwise skipped.
    """
    settings = settings or DEFAULT_SETTINGS
    player = player or PlayerContext()
    processed = process_files(uploads, settings=settings, max_workers=max_workers)

    warnings: list[str] = []
    unknown = tuple(p.filename for p in processed if not p.detection.is_known)
    for filename in unknown:
        warnings.append(f"Could not identify the format of {filename}; file skipped")
    for p in processed:
        if p.dropped_rows:
            warnings.append(f"{p.filename}: dropped {p.dropped_rows} unreadable row(s)")

    session = _session(processed, player, settings)
    kinematic: list[KinematicFrame] = []
    energy: list[EnergyFrame] = []
    for p in processed:
        if p.frames is None:
            continue
        target = kinematic if p.frames.kind is SchemaKind.KINEMATICS else energy
        target.extend(p.frames.frames)  # type: ignore[arg-type]

    matched = frame_matcher.match(kinematic, energy) if kinematic or energy else None
    if matched is not None:
        warnings.extend(matched.warnings)

    scores = score(
        matched.records if matched is not None else (),
        raw_metrics=player.raw_metrics or None,
        session=session,
        weight_lbs=player.weight_lbs,
        height_inches=player.height_inches,
        dominant_hand=player.dominant_hand,
        level=player.level,
        settings=settings,
    )
    logger.info(
        "Batch of %d files: %d unknown, session=%s, matched=%d, composite=%s",
        len(processed),
        len(unknown),
        session is not None,
        len(matched.records) if matched is not None else 0,
        scores.composite,
    )
    return BatchResult(
        files=tuple(processed),
        scores=scores,
        session=session,
        match_result=matched,
        unknown_files=unknown,
        warnings=tuple(warnings),
    )


def _session(processed: Sequence[ProcessedFile], player: PlayerContext, settings: ScoringSettings) -> SessionStats | None:
    launch = [p for p in processed if p.swings is not None]
    if not launch:
        return None
    swings: list[SwingRecord] = []
    for p in launch:
        swings.extend(p.swings.swings)  # type: ignore[union-attr]
    brands = {p.detection.brand for p in launch}
    brand = brands.pop() if len(brands) == 1 else Brand.GENERIC
    return aggregate(
        swings,
        brand or Brand.GENERIC,
        level=player.level,
        batting_side=(player.dominant_hand or "R").strip().upper()[:1] or "R",
        settings=settings,
    )
