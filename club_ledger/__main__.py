from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from club_ledger.engine import run_club
from club_ledger.event_sink import InMemoryReportSink, ReportSink, TextReportSink
from club_ledger.logging_utils import configure_logging, default_log_level, get_logger
from club_ledger.stream_io import InputFormatError, dump_records, load_club_log

logger = get_logger("club_ledger.cli")

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_BAD_INPUT = 2


class _TeeSink(ReportSink):
    """Forward every line to several sinks (stdout plus the optional JSON dump)."""

    def __init__(self, *sinks: ReportSink) -> None:
        self._sinks = sinks

    def emit(self, line) -> None:
        for sink in self._sinks:
            sink.emit(line)


def _cmd_run(args: argparse.Namespace) -> int:
    configure_logging(args.log_level)

    try:
        log = load_club_log(Path(str(args.log)))
    except InputFormatError as e:
        if e.line is not None:
            # The offending header line is part of the report contract.
            print(e.line)
        print(f"ERROR: invalid club log: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    logger.info(
        "replaying %d events on %d tables",
        len(log.events),
        log.config.table_count,
    )

    stdout_sink = TextReportSink(sys.stdout)
    collected = InMemoryReportSink()
    sink: ReportSink = _TeeSink(stdout_sink, collected) if args.records_out else stdout_sink

    result = run_club(log.config, log.events, sink=sink)

    if args.records_out:
        out_path = Path(str(args.records_out))
        out_path.write_text(json.dumps(dump_records(collected.lines), indent=2), encoding="utf-8")

    if result.aborted:
        logger.warning("run aborted after %d of %d events", result.processed, len(log.events))
        return EXIT_ABORTED
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="club_ledger",
        description=(
            "Club Ledger — table allocation replay.\n"
            "\n"
            "Replays a day's client event log against the club's tables and prints\n"
            "the event journal followed by per-table revenue."
        ),
    )

    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Replay a club log and print the journal and revenue report.")
    run.add_argument("log", type=str, help="Path to the club log (text).")
    run.add_argument(
        "--records-out",
        type=str,
        default=None,
        help="Optional: also write every emitted line as structured JSON to this path.",
    )
    run.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=default_log_level(),
        help="Diagnostic log level on stderr (default: $CLUB_LEDGER_LOG_LEVEL or WARNING).",
    )
    run.set_defaults(func=_cmd_run)

    return parser


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
