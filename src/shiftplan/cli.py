from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from shiftplan.io.snapshot import SnapshotError, load_snapshot, save_snapshot
from shiftplan.models.constraints import GeneratorConfig
from shiftplan.models.validated import ValidatedGeneratorConfig
from shiftplan.solver.generator import ScheduleGenerator
from shiftplan.solver.stats import calculate_team_stats, stats_to_dataframe, stats_to_dict_list
from shiftplan.solver.validation import validate_month
from shiftplan.utils.logging_setup import get_logger, setup_logging
from shiftplan.utils.structured_logging import bind_context, clear_context, configure_structlog

logger = get_logger("shiftplan.cli")

EXIT_INPUT_ERROR = 2


def _load_config(path: Optional[str]) -> GeneratorConfig:
    if not path:
        return GeneratorConfig()
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return ValidatedGeneratorConfig(**data).to_dataclass()


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _cmd_generate(args: argparse.Namespace) -> int:
    snapshot = load_snapshot(args.snapshot)
    config = _load_config(args.config)
    rng = random.Random(args.seed) if args.seed is not None else None

    bind_context(year=snapshot.year, month=snapshot.month)
    try:
        result = ScheduleGenerator(snapshot, args.working_days, config, rng).run()
    finally:
        clear_context()

    generated = snapshot.with_schedule(result.schedule)
    if args.output:
        save_snapshot(generated, args.output)

    if args.json_out:
        _emit({
            "summary": result.summary(),
            "hours": result.hours,
            "targets": result.targets,
            "under_target": result.under_target,
        })
    else:
        print("Summary:")
        for k, v in result.summary().items():
            print(f" - {k}: {v}")
        for emp_id in result.under_target:
            print(f" ! {emp_id}: {result.hours[emp_id]}h / {result.targets[emp_id]}h")
        if args.output:
            print(f"Written to {args.output}")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    snapshot = load_snapshot(args.snapshot)
    result = validate_month(snapshot, _load_config(args.config))

    if args.json_out:
        _emit({
            "summary": result.as_dict(),
            "violations": [
                {"employee": v.employee_id, "day": v.day, "type": v.type, "message": v.message}
                for v in result.violations
            ],
            "understaffed": {
                str(day): status.messages for day, status in result.staffing.items() if not status.valid
            },
        })
    else:
        print("Validation:")
        for k, v in result.as_dict().items():
            print(f" - {k}: {v}")
        for v in result.violations:
            print(f" ! {v.employee_id} day {v.day}: {v.message}")
        for day, status in result.staffing.items():
            if not status.valid:
                print(f" ~ day {day}: {', '.join(status.messages)}")
    return 1 if result.has_critical_issues else 0


def _cmd_stats(args: argparse.Namespace) -> int:
    snapshot = load_snapshot(args.snapshot)
    stats = calculate_team_stats(snapshot, args.working_days)

    if args.json_out:
        _emit({"stats": stats_to_dict_list(stats)})
    else:
        print(stats_to_dataframe(stats).to_string(index=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="shiftplan", description="Monthly shift schedule tools")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")
    p.add_argument("--log-file", default=None, help="Also log to this file (rotated)")
    p.add_argument("--log-json", action="store_true", help="Render structured events as JSON")
    sub = p.add_subparsers(dest="command", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("snapshot", help="Path to the snapshot JSON file")
        sp.add_argument("--json", dest="json_out", action="store_true", help="JSON output")

    g = sub.add_parser("generate", help="Generate the month's schedule")
    add_common(g)
    g.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    g.add_argument("--config", default=None, help="Generator config JSON file")
    g.add_argument("--working-days", type=int, default=None, help="Override the working-day count")
    g.add_argument("-o", "--output", default=None, help="Write the generated snapshot here")
    g.set_defaults(func=_cmd_generate)

    v = sub.add_parser("validate", help="Check labour rules and staffing")
    add_common(v)
    v.add_argument("--config", default=None, help="Generator config JSON file")
    v.set_defaults(func=_cmd_validate)

    s = sub.add_parser("stats", help="Hours and fatigue per employee")
    add_common(s)
    s.add_argument("--working-days", type=int, default=None, help="Override the working-day count")
    s.set_defaults(func=_cmd_stats)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = {0: "WARNING", 1: "INFO"}.get(args.verbose, "DEBUG")
    setup_logging(level="DEBUG" if args.log_file else level, log_file=args.log_file, console_level=level)
    configure_structlog(json_output=args.log_json)

    try:
        return args.func(args)
    except (SnapshotError, ValidationError, json.JSONDecodeError, OSError) as e:
        logger.debug("Input error", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
