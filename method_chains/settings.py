from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Mapping, Optional

ENV_PREFIX = "METHOD_CHAINS_"


def _strip_quotes(v: str) -> str:
    v = v.strip()
    if len(v) >= 2 and ((v[0] == v[-1] == '"') or (v[0] == v[-1] == "'")):
        return v[1:-1]
    return v


def load_dotenv(path: str | Path = ".env", *, override: bool = False) -> bool:
    """A tiny .env loader (no external dependency).

    - Parses KEY=VALUE lines (an optional leading ``export`` is ignored)
    - Ignores blank lines and comments (# ...)
    - Supports quoted values and inline comments after a space + #
    - Writes into os.environ (unless already set and override=False)

    Returns True if the file existed and was loaded.
    """
    p = Path(path).expanduser()
    if not p.is_file():
        return False

    for raw in p.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        k, v = line.split("=", 1)
        key = k.strip()
        val = v.strip()
        if not key:
            continue

        if val and val[0] not in "'\"":
            idx = val.find(" #")
            if idx != -1:
                val = val[:idx].rstrip()
        val = _strip_quotes(val)

        if (not override) and os.environ.get(key):
            continue
        os.environ[key] = val
    return True


def auto_load_dotenv(explicit_path: Optional[str] = None, *, max_parents: int = 5) -> Optional[str]:
    """Load the first .env found (explicit path, then cwd and its parents)."""
    candidates = []
    if explicit_path:
        candidates.append(Path(explicit_path))
    cur = Path.cwd()
    for _ in range(max_parents):
        candidates.append(cur / ".env")
        cur = cur.parent

    for c in candidates:
        if load_dotenv(c):
            return str(c)
    return None


def _split_names(raw: str) -> FrozenSet[str]:
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


@dataclass
class Settings:
    project_dir: Optional[Path] = None
    output_path: Optional[Path] = None
    trace_path: Optional[Path] = None
    ignore_dirs: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def path_of(name: str) -> Optional[Path]:
            raw = (env.get(ENV_PREFIX + name) or "").strip()
            return Path(raw).expanduser() if raw else None

        return cls(
            project_dir=path_of("PROJECT_DIR"),
            output_path=path_of("OUTPUT_PATH"),
            trace_path=path_of("TRACE_PATH"),
            ignore_dirs=_split_names(env.get(ENV_PREFIX + "IGNORE_DIRS", "")),
        )
