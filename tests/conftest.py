"""Pytest configuration and fixtures for test data.

Shared fixtures for all tests. Sample documents live in tests/fixtures:
- master.tcx: four trackpoints at t=0,10,20,30s in laps starting at 0s and 20s
- bpm.tcx: heart-rate samples at t=5s (100), t=20s (110), t=25s (120)

Model builders live in tests/factories.py.
"""

from pathlib import Path

import pytest

from tcx_hr_merge.models import TcxDocument
from tests.factories import make_document, make_trackpoint


@pytest.fixture
def fixture_base_path() -> Path:
    """Return the base path for test fixtures.

    Returns:
        Path to tests/fixtures directory.
    """
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def master_tcx_path(fixture_base_path: Path) -> Path:
    return fixture_base_path / "master.tcx"


@pytest.fixture
def bpm_tcx_path(fixture_base_path: Path) -> Path:
    return fixture_base_path / "bpm.tcx"


@pytest.fixture
def scenario_master() -> TcxDocument:
    """Master trackpoints at t=0,10,20,30 with laps starting at 0 and 20."""
    return make_document(
        (0, [make_trackpoint(0, lat="52.0"), make_trackpoint(10, lat="52.1")]),
        (20, [make_trackpoint(20, lat="52.2"), make_trackpoint(30, lat="52.3")]),
    )


@pytest.fixture
def scenario_heart_rate() -> TcxDocument:
    """Heart-rate samples at t=5 (100), t=20 (110), t=25 (120)."""
    return make_document(
        (
            5,
            [
                make_trackpoint(5, bpm=100),
                make_trackpoint(20, bpm=110),
                make_trackpoint(25, bpm=120),
            ],
        )
    )


@pytest.fixture
def write_tcx_file(tmp_path: Path):
    """Factory fixture to write TCX content to a temporary file.

    Usage:
        def test_something(write_tcx_file):
            path = write_tcx_file("broken.tcx", "<TrainingCenterDatabase>")
    """

    def _write(filename: str, content: str) -> Path:
        filepath = tmp_path / filename
        filepath.write_text(content, encoding="utf-8")
        return filepath

    return _write
