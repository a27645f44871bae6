"""Aggregation, matching and scoring services."""

from swing_lab.services.export import scores_to_record, session_to_record
from swing_lab.services.frame_matcher import match
from swing_lab.services.kinetic_potential import project
from swing_lab.services.pipeline import (
    BatchResult,
    PlayerContext,
    ProcessedFile,
    UploadedFile,
    process_file,
    run_batch,
)
from swing_lab.services.scoring import score
from swing_lab.services.session_aggregator import aggregate

__all__ = [
    "BatchResult",
    "PlayerContext",
    "ProcessedFile",
    "UploadedFile",
    "aggregate",
    "match",
    "process_file",
    "project",
    "run_batch",
    "score",
    "scores_to_record",
    "session_to_record",
]
