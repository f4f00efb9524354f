"""
Command-line interface for the weekly lesson timetable scheduler.

Usage examples:
    python -m lesson_timetable.cli --config data/sample_roster.json
    python -m lesson_timetable.cli --config data/sample_roster.json --out result.json
    python -m lesson_timetable.cli --config cfg.json --csv timetable.csv --seed 7
    python -m lesson_timetable.cli --config cfg.json --students names.txt --coach peter

Exit codes:
    0  every student got all of their lessons
    1  bad arguments, unreadable config, precheck errors, or an empty roster
    2  schedule produced but some students are under-scheduled
       (argparse usage errors also exit 2)
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from lesson_timetable.export import write_csv
from lesson_timetable.io_json import ConfigError, load_config, save_result
from lesson_timetable.models import DAYS, DAY_LABELS, SLOT_LABELS, SLOTS, Config
from lesson_timetable.roster import load_student_file
from lesson_timetable.solver.api import solve
from lesson_timetable.solver.precheck import PrecheckError, precheck
from lesson_timetable.solver.result import COMPLETE, EMPTY, ScheduleResult
from lesson_timetable.stats import report

console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    root = logging.getLogger()
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=err_console, show_path=False))
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def _error(msg: str) -> None:
    err_console.print(f"[bold red]{escape('[ERROR]')}[/bold red] {escape(msg)}", highlight=False)


def _timetable(result: ScheduleResult, cfg: Config) -> Table:
    """One row per coach, one column per (day, slot) cell."""
    table = Table(title="Weekly timetable", show_lines=True)
    table.add_column("Coach", style="cyan", no_wrap=True)
    for d in DAYS:
        for s in SLOTS:
            table.add_column(f"{DAY_LABELS[d][:3]}\n{SLOT_LABELS[s]}", justify="center")

    by_cell = {(e.coach_id, e.day, e.slot): e for e in result.entries}
    for c in cfg.coaches:
        cells = []
        for d in DAYS:
            for s in SLOTS:
                e = by_cell.get((c.id, d, s))
                if e is None:
                    cells.append("")
                else:
                    name = escape(e.student_name)
                    cells.append(f"[bold]{name}[/bold]" if e.locked else name)
        table.add_row(escape(c.name), *cells)
    return table


def _summary(result: ScheduleResult, cfg: Config) -> Table:
    stats = report(result.entries, cfg.students, cfg.coaches)
    table = Table(title="Summary")
    table.add_column("Metric", style="magenta")
    table.add_column("Value", justify="right")
    table.add_row("Status", result.status)
    table.add_row("Total lessons", str(stats.total_lessons))
    table.add_row("Students", str(len(cfg.students)))
    table.add_row("Fully unscheduled", str(len(stats.unscheduled_students)))
    for name, n in stats.coach_utilization.items():
        table.add_row(f"Coach {escape(name)}", str(n))
    return table


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Weekly tennis lesson timetable scheduler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  lesson-timetable --config data/sample_roster.json\n"
            "  lesson-timetable --config cfg.json --out result.json --csv timetable.csv\n"
        ),
    )
    parser.add_argument("--config", required=True, metavar="FILE",
                        help="path to the roster/constraints JSON")
    parser.add_argument("--out", default=None, metavar="FILE",
                        help="write result JSON to this path (optional)")
    parser.add_argument("--csv", default=None, metavar="FILE",
                        help="write the timetable as CSV to this path (optional)")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the reshuffled passes (default: from config, else random)")
    parser.add_argument("--passes", type=int, default=None,
                        help="number of passes (default: from config, else 3)")
    parser.add_argument("--students", default=None, metavar="FILE",
                        help="text file of extra student names, one per line")
    parser.add_argument("--coach", default=None, metavar="ID",
                        help="coach id the --students file is assigned to")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log every placement")
    args = parser.parse_args(argv)

    if bool(args.students) != bool(args.coach):
        parser.error("--students and --coach must be given together")
    if args.passes is not None and args.passes < 1:
        parser.error("--passes must be >= 1")

    _setup_logging(args.verbose)

    # ── 1. load config ────────────────────────────────────────────────────────
    try:
        cfg = load_config(args.config)
    except FileNotFoundError:
        _error(f"File not found: {args.config}")
        sys.exit(1)
    except (ConfigError, ValueError) as e:
        _error(f"Could not load config: {e}")
        sys.exit(1)

    if args.students:
        if cfg.get_coach(args.coach) is None:
            _error(f"Unknown coach id: {args.coach}")
            sys.exit(1)
        try:
            cfg.students.extend(load_student_file(args.students, args.coach,
                                                  existing=cfg.students))
        except (OSError, ValueError) as e:
            _error(f"Could not read students: {e}")
            sys.exit(1)

    # ── 2. empty roster is a user problem, not a crash ────────────────────────
    if not cfg.students:
        _error("Please add students to coaches first.")
        sys.exit(1)

    # ── 3. precheck ───────────────────────────────────────────────────────────
    errors, warnings = precheck(cfg)
    for w in warnings:
        console.print(f"[yellow]{escape('[WARNING]')}[/yellow] {escape(w)}", highlight=False)

    if errors:
        _error(f"{len(errors)} precheck error(s) found — fix these and run again:")
        for i, err in enumerate(errors, 1):
            err_console.print(f"  {i}. {escape(err)}", highlight=False)
        sys.exit(1)

    # ── 4. schedule ───────────────────────────────────────────────────────────
    try:
        result = solve(cfg, seed=args.seed, passes=args.passes)
    except (PrecheckError, ValueError) as e:
        _error(str(e))
        sys.exit(1)

    if result.status == EMPTY:
        for d in result.diagnostics:
            _error(d)
        sys.exit(1)

    # ── 5. print ──────────────────────────────────────────────────────────────
    for d in result.diagnostics:
        console.print(f"[blue]{escape('[DIAG]')}[/blue] {escape(d)}", highlight=False)
    console.print(_timetable(result, cfg))
    console.print(_summary(result, cfg))
    for u in result.unscheduled:
        console.print(f"[yellow]Unscheduled:[/yellow] {escape(u.name)} ({u.scheduled}/{u.needed})",
                      highlight=False)

    # ── 6. write output files (optional) ─────────────────────────────────────
    if args.out:
        save_result(result, args.out)
        console.print(f"Result written to: {args.out}")
    if args.csv:
        write_csv(result.entries, cfg.coaches, args.csv)
        console.print(f"Timetable written to: {args.csv}")

    sys.exit(0 if result.status == COMPLETE else 2)


if __name__ == "__main__":
    main()
