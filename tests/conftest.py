"""Shared pytest fixtures for test modules."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from swing_lab.domain.table import RawTable
from swing_lab.ingest.csv_reader import parse_table

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all SWINGLAB__ env vars so tests are isolated from the shell."""
    for key in list(os.environ):
        if key.startswith("SWINGLAB__"):
            monkeypatch.delenv(key)


@pytest.fixture
def hittrax_table() -> RawTable:
    return parse_table("Velo,LA,Dist,Result\n92,15,350,HomeRun\n78,-5,10,GroundOut\n0,0,0,Miss\n")


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "session.csv"
    path.write_text("\ufeffExit Velocity, Launch Angle ,Distance\n95.5,22,380\n,,\n88,\"1,0\",200\n", encoding="utf-8")
    return path
