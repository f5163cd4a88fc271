"""
Per-project aggregation: every ``.java`` file under a project directory is
analyzed independently and its chain lengths are folded into one histogram.
"""
from __future__ import annotations

import contextlib
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Dict, List

from .analysis.histogram import ChainStats, build_histogram, summarize_histogram
from .analysis.pipeline import method_chain_counts
from .trace.trace_utils import get_tracer
from .utils import iter_java_files, read_source_text


def progress(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        print(message, file=sys.stderr, flush=True)


@dataclass
class ProjectResult:
    name: str
    path: Path
    files: int
    histogram: Dict[int, int] = field(default_factory=dict)

    @property
    def chains(self) -> int:
        return sum(self.histogram.values())

    def stats(self) -> ChainStats:
        return summarize_histogram(self.histogram)


def process_project(
    project_dir: Path,
    *,
    index: int = 0,
    total: int = 1,
    name: str = "",
    ignore: AbstractSet[str] = frozenset(),
    quiet: bool = False,
) -> ProjectResult:
    """Analyze one project directory (recursively) into a chain histogram.

    When a tracer is active the project gets one ``project`` trace record,
    written even if the walk fails.
    """
    project_dir = Path(project_dir)
    name = name or project_dir.name

    tracer = get_tracer()
    span_cm = tracer.span(stage="project", project=name) if tracer is not None else contextlib.nullcontext()
    with span_cm as span:
        java_paths = list(iter_java_files(project_dir, ignore))
        progress(f"🔎 [{index + 1}/{total}] processing {len(java_paths)} Java files for project {name}", quiet=quiet)

        lengths: List[int] = []
        for path in java_paths:
            lengths.extend(method_chain_counts(read_source_text(path)))
        histogram = build_histogram(lengths)

        if span is not None:
            span.record(files=len(java_paths), chains=len(lengths), histogram=histogram)

    return ProjectResult(name=name, path=project_dir, files=len(java_paths), histogram=histogram)
