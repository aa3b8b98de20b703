"""Unit tests for LocalReportStorage."""

import os
from pathlib import Path

import pytest

from timeledger.domain.entities import RenderedReport
from timeledger.domain.exceptions import RenderFailedError
from timeledger.infrastructure.storage.local_report_storage import LocalReportStorage


def _report(content: bytes = b"%PDF-1.4 test") -> RenderedReport:
    return RenderedReport(filename="time-report-2024-06.pdf", content=content, page_count=2)


@pytest.mark.asyncio
async def test_save_report_writes_under_account_dir(tmp_path: Path):
    storage = LocalReportStorage(str(tmp_path))
    path = await storage.save_report(_report(), "user-1")

    assert path == tmp_path / "user-1" / "time-report-2024-06.pdf"
    assert path.read_bytes() == b"%PDF-1.4 test"
    assert [p.name for p in path.parent.iterdir()] == ["time-report-2024-06.pdf"]


@pytest.mark.asyncio
async def test_save_report_replaces_previous_copy(tmp_path: Path):
    storage = LocalReportStorage(str(tmp_path))
    await storage.save_report(_report(b"old"), "user-1")
    path = await storage.save_report(_report(b"new"), "user-1")
    assert path.read_bytes() == b"new"


@pytest.mark.asyncio
async def test_account_id_cannot_escape_output_dir(tmp_path: Path):
    storage = LocalReportStorage(str(tmp_path))
    path = await storage.save_report(_report(), "../../etc")
    assert tmp_path in path.parents


@pytest.mark.asyncio
async def test_failed_write_leaves_no_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    storage = LocalReportStorage(str(tmp_path))

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail_replace)
    with pytest.raises(RenderFailedError):
        await storage.save_report(_report(), "user-1")

    assert list((tmp_path / "user-1").iterdir()) == []
