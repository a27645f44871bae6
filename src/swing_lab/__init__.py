"""Swing-data classification and 4B scoring."""

import logging

from swing_lab._logging import configure_logging
from swing_lab.domain.detection import Brand, Confidence, DetectionResult, SchemaKind
from swing_lab.domain.scores import Category, Grade, RebootScores
from swing_lab.domain.session_stats import SessionStats
from swing_lab.ingest.classifier import classify
from swing_lab.ingest.csv_reader import parse_table, read_table
from swing_lab.ingest.normalizer import normalize_frames, normalize_swings
from swing_lab.services import (
    BatchResult,
    PlayerContext,
    UploadedFile,
    aggregate,
    match,
    project,
    run_batch,
    score,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BatchResult",
    "Brand",
    "Category",
    "Confidence",
    "DetectionResult",
    "Grade",
    "PlayerContext",
    "RebootScores",
    "SchemaKind",
    "SessionStats",
    "UploadedFile",
    "aggregate",
    "classify",
    "configure_logging",
    "match",
    "normalize_frames",
    "normalize_swings",
    "parse_table",
    "project",
    "read_table",
    "run_batch",
    "score",
]
