"""
JSONL run trace: one record per analyzed project plus one for the whole run.

Record keys: run_id, stage, project, files, chains, histogram, latency_ms,
ok, error_type, extra. Histogram keys are written as strings (JSON objects).
"""
from __future__ import annotations

import contextlib
import contextvars
import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


_CURRENT_TRACER: contextvars.ContextVar[Optional["TraceLogger"]] = contextvars.ContextVar(
    "CURRENT_TRACER", default=None
)


def get_tracer() -> Optional["TraceLogger"]:
    return _CURRENT_TRACER.get()


@contextlib.contextmanager
def using_tracer(tracer: "TraceLogger"):
    token = _CURRENT_TRACER.set(tracer)
    try:
        yield tracer
    finally:
        _CURRENT_TRACER.reset(token)


@dataclass
class TraceSpan:
    tracer: "TraceLogger"
    stage: str
    project: Optional[str] = None
    files: Optional[int] = None
    chains: Optional[int] = None
    histogram: Optional[Mapping[int, int]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _start: float = 0.0

    def record(
        self,
        *,
        files: Optional[int] = None,
        chains: Optional[int] = None,
        histogram: Optional[Mapping[int, int]] = None,
        **extra: Any,
    ) -> None:
        if files is not None:
            self.files = files
        if chains is not None:
            self.chains = chains
        if histogram is not None:
            self.histogram = histogram
        self.extra.update(extra)

    def __enter__(self) -> "TraceSpan":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.tracer.log(
            stage=self.stage,
            project=self.project,
            files=self.files,
            chains=self.chains,
            histogram=self.histogram,
            latency_ms=int((time.perf_counter() - self._start) * 1000),
            error_type=exc_type.__name__ if exc_type is not None else None,
            extra=self.extra,
        )
        return False


class TraceLogger:
    def __init__(self, *, run_id: str, trace_path: Path, base_extra: Optional[Dict[str, Any]] = None) -> None:
        self.run_id = run_id
        self.trace_path = Path(trace_path)
        self.trace_path.parent.mkdir(parents=True, exist_ok=True)
        self.base_extra = base_extra or {}

    def span(self, *, stage: str, project: Optional[str] = None) -> TraceSpan:
        return TraceSpan(tracer=self, stage=stage, project=project)

    def log(
        self,
        *,
        stage: str,
        project: Optional[str] = None,
        files: Optional[int] = None,
        chains: Optional[int] = None,
        histogram: Optional[Mapping[int, int]] = None,
        latency_ms: Optional[int] = None,
        error_type: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        payload: Dict[str, Any] = {
            "run_id": self.run_id,
            "stage": stage,
            "project": project,
            "files": files,
            "chains": chains,
            "histogram": None if histogram is None else {str(k): v for k, v in histogram.items()},
            "latency_ms": latency_ms,
            "ok": error_type is None,
            "error_type": error_type or "",
            "extra": {**self.base_extra, **(extra or {})},
        }
        with self.trace_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
