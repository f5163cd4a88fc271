"""
Output writers.

CSV layout (one row per project and distinct chain length, longest first)::

    project, chain length, frequency
    demo, 3, 1
    demo, 1, 12

Rows are joined by ", ", a two-character separator ``csv.writer`` cannot
emit, so rows are assembled by hand. Project names are still quoted by
``csv.writer`` (minimal quoting) so a comma, quote or newline in a name
cannot split a row.
"""
from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .project import ProjectResult

CSV_HEADER = ("project", "chain length", "frequency")
CSV_SEPARATOR = ", "


def csv_field(value: Any) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\r\n").writerow([str(value)])
    return buf.getvalue()[: -len("\r\n")]


def format_csv_rows(result: ProjectResult) -> List[str]:
    return [
        CSV_SEPARATOR.join((csv_field(result.name), str(length), str(freq)))
        for length, freq in sorted(result.histogram.items(), reverse=True)
    ]


class HistogramCsvWriter:
    """Streams project rows into a CSV file; an existing file is overwritten."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._fh = None

    def __enter__(self) -> "HistogramCsvWriter":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("w", encoding="utf-8", newline="")
        self._fh.write(CSV_SEPARATOR.join(CSV_HEADER) + "\n")
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
        return False

    def append(self, result: ProjectResult) -> int:
        if self._fh is None:
            raise RuntimeError("HistogramCsvWriter used outside of its context")
        rows = format_csv_rows(result)
        for row in rows:
            self._fh.write(row + "\n")
        self._fh.flush()
        return len(rows)


def build_summary(results: Sequence[ProjectResult]) -> Dict[str, Any]:
    projects = []
    for r in results:
        projects.append(
            {
                "project": r.name,
                "path": str(r.path),
                "files": r.files,
                # JSON object keys are strings
                "histogram": {str(k): v for k, v in r.histogram.items()},
                "stats": asdict(r.stats()),
            }
        )
    return {
        "projects": projects,
        "total_files": sum(r.files for r in results),
        "total_chains": sum(r.chains for r in results),
    }


def write_summary_json(results: Sequence[ProjectResult], out_path: Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(build_summary(results), ensure_ascii=False, indent=2), encoding="utf-8")
    return out_path
