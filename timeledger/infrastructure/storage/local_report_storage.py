"""Local filesystem storage for rendered report documents.

Storage layout:
    <output_dir>/<user_id>/time-report-<YYYY>[-<MM>].pdf

A report is written to a temporary file next to its destination and moved
into place with ``os.replace``, so a failed write never leaves a truncated
document under the final name.
"""

import logging
import os
import re
import tempfile
from pathlib import Path

from timeledger.application.interfaces import ReportArchive
from timeledger.domain.entities import RenderedReport
from timeledger.domain.exceptions import RenderFailedError

logger = logging.getLogger(__name__)


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


class LocalReportStorage(ReportArchive):
    """Infrastructure adapter implementing the ReportArchive port on disk."""

    def __init__(self, output_dir: str):
        self._output_dir = Path(output_dir)

    def report_path(self, user_id: str, filename: str) -> Path:
        return self._output_dir / _sanitise(user_id) / Path(filename).name

    async def save_report(self, report: RenderedReport, user_id: str) -> Path:
        """Atomically write a rendered report; replaces an older copy of the same period.

        Raises:
            RenderFailedError: If the document could not be written.
        """
        dest_path = self.report_path(user_id, report.filename)
        tmp_path: str | None = None
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=dest_path.parent, prefix=".tmp-", suffix=".pdf", delete=False
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(report.content)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, dest_path)
        except OSError as exc:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise RenderFailedError(f"Could not save {report.filename}: {exc}") from exc

        logger.info("Stored report: %s (%d bytes)", dest_path, len(report.content))
        return dest_path
