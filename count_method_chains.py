#!/usr/bin/env python3
"""
Count method-chain lengths in Java projects and write a per-project histogram CSV.

Usage examples:
  python count_method_chains.py -p corpus/ -o chains.csv
  python count_method_chains.py -p corpus/my-app -o chains.csv --single-project
  python count_method_chains.py -p corpus/ -o chains.csv --skip-build-dirs --summary summary.json --trace trace.jsonl

Every immediate subdirectory of --project-dir is one project unless
--single-project is given. Defaults for the paths can come from the
environment (or a .env file): METHOD_CHAINS_PROJECT_DIR,
METHOD_CHAINS_OUTPUT_PATH, METHOD_CHAINS_TRACE_PATH, METHOD_CHAINS_IGNORE_DIRS.
"""
from __future__ import annotations

import argparse
import contextlib
import uuid
from pathlib import Path
from typing import AbstractSet, List, Optional, Sequence

from method_chains.project import ProjectResult, process_project, progress
from method_chains.report import HistogramCsvWriter, write_summary_json
from method_chains.settings import Settings, auto_load_dotenv
from method_chains.trace.trace_utils import TraceLogger, using_tracer
from method_chains.utils import BUILD_DIRS, list_project_dirs


def run_method_chains(
    *,
    project_dir: Path,
    output_path: Path,
    single_project: bool = False,
    ignore: AbstractSet[str] = frozenset(),
    summary_path: Optional[Path] = None,
    trace_path: Optional[Path] = None,
    quiet: bool = False,
) -> List[ProjectResult]:
    project_dir = Path(project_dir)
    output_path = Path(output_path)

    if single_project:
        if not project_dir.is_dir():
            raise SystemExit(f"❌ Cannot read directory {project_dir}")
        project_dirs = [project_dir]
    else:
        try:
            project_dirs = list_project_dirs(project_dir)
        except OSError as e:
            raise SystemExit(f"❌ Cannot read directory {project_dir}: {e}") from e

    total = len(project_dirs)
    progress(f"📂 Found {total} project directories in {project_dir}.", quiet=quiet)
    progress(f"📝 Creating CSV file at {output_path} (if file exists, it will be overwritten)", quiet=quiet)

    tracer = None
    if trace_path is not None:
        try:
            tracer = TraceLogger(
                run_id=uuid.uuid4().hex[:12],
                trace_path=trace_path,
                base_extra={"project_dir": str(project_dir), "output_path": str(output_path)},
            )
        except OSError as e:
            raise SystemExit(f"❌ Cannot create file {trace_path}: {e}") from e

    results: List[ProjectResult] = []
    with contextlib.ExitStack() as stack:
        if tracer is not None:
            stack.enter_context(using_tracer(tracer))
            run_span = stack.enter_context(tracer.span(stage="run_total"))
            run_span.record(projects=total, single_project=single_project)
        try:
            writer = stack.enter_context(HistogramCsvWriter(output_path))
        except OSError as e:
            raise SystemExit(f"❌ Cannot create file {output_path}: {e}") from e

        for i, pdir in enumerate(project_dirs):
            name = pdir.resolve().name if single_project else pdir.name
            progress(f"⚙️ [{i + 1}/{total}] processing project {name}", quiet=quiet)

            try:
                result = process_project(pdir, index=i, total=total, name=name, ignore=ignore, quiet=quiet)
            except OSError as e:
                raise SystemExit(f"❌ Failed to process project {name}: {e}") from e

            rows = len(result.histogram)
            progress(
                f"📊 [{i + 1}/{total}] appending {rows} items for project {name} to CSV {output_path}",
                quiet=quiet,
            )
            try:
                writer.append(result)
            except OSError as e:
                raise SystemExit(f"❌ Cannot write to file {output_path}: {e}") from e

            if result.chains:
                st = result.stats()
                progress(
                    f"   chains={st.chains} mean={st.mean_length:.2f} p95={st.p95_length:.1f} "
                    f"max={st.max_length} chained={st.chained_share:.1%}",
                    quiet=quiet,
                )
            results.append(result)

        if tracer is not None:
            run_span.record(
                files=sum(r.files for r in results),
                chains=sum(r.chains for r in results),
            )

    if summary_path is not None:
        try:
            write_summary_json(results, summary_path)
        except OSError as e:
            raise SystemExit(f"❌ Cannot create file {summary_path}: {e}") from e
        progress(f"✅ Summary JSON: {Path(summary_path).resolve()}", quiet=quiet)

    progress("✅ Done.", quiet=quiet)
    return results


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="method-chains",
        description="Histogram of method-chain lengths per Java project, written as CSV.",
    )
    ap.add_argument(
        "--dotenv",
        default=".env",
        help="Optional path to a .env file; .env in the current or parent directories is also tried.",
    )
    ap.add_argument("-p", "--project-dir", type=Path, default=None, help="Directory holding one subdirectory per project")
    ap.add_argument("-o", "--output-path", type=Path, default=None, help="CSV output path (overwritten)")
    ap.add_argument(
        "--single-project",
        action="store_true",
        help="Treat --project-dir itself as a single project instead of a directory of projects.",
    )
    ap.add_argument(
        "--ignore-dir",
        action="append",
        default=[],
        metavar="NAME",
        help="Directory name to skip while walking projects (repeatable).",
    )
    ap.add_argument(
        "--skip-build-dirs",
        action="store_true",
        help=f"Skip common build/VCS directories: {', '.join(sorted(BUILD_DIRS))}.",
    )
    ap.add_argument("--summary", type=Path, default=None, help="Optional per-project summary JSON path")
    ap.add_argument("--trace", type=Path, default=None, help="Optional JSONL trace path")
    ap.add_argument("-q", "--quiet", action="store_true", help="No progress output on stderr")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    auto_load_dotenv(args.dotenv)
    settings = Settings.from_env()

    project_dir = args.project_dir or settings.project_dir
    output_path = args.output_path or settings.output_path
    if project_dir is None:
        ap.error("--project-dir is required (or set METHOD_CHAINS_PROJECT_DIR)")
    if output_path is None:
        ap.error("--output-path is required (or set METHOD_CHAINS_OUTPUT_PATH)")

    ignore = set(settings.ignore_dirs) | set(args.ignore_dir)
    if args.skip_build_dirs:
        ignore |= BUILD_DIRS

    run_method_chains(
        project_dir=project_dir,
        output_path=output_path,
        single_project=args.single_project,
        ignore=frozenset(ignore),
        summary_path=args.summary,
        trace_path=args.trace or settings.trace_path,
        quiet=args.quiet,
    )


if __name__ == "__main__":
    main()
