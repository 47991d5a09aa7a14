"""Command line interface for the hidden field scanner."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.config import load_configuration
from .core.errors import InputError
from .core.models import ScanLevel, ScanReport
from .scan.orchestrator import run_scan
from .server import ScanServer

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hidden form field scanner")
    parser.add_argument("-u", "--url", help="Target page URL")
    parser.add_argument(
        "-l",
        "--level",
        default=ScanLevel.SIMPLE.value,
        choices=[level.value for level in ScanLevel],
        help="Scan level: simple (static markup), medium or advanced (rendered, with frames)",
    )
    parser.add_argument("--report", help="Write the JSON report to this file")
    parser.add_argument("--json", action="store_true", help="Print the JSON report instead of a summary")
    parser.add_argument(
        "--include-explicit-hidden",
        action="store_true",
        default=None,
        help='Also report inputs declared with type="hidden"',
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window for rendered scans")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP endpoint instead of a single scan")
    parser.add_argument("--port", type=int, default=None, help="Port for --serve")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)
    if not args.serve and not args.url:
        parser.error("--url is required unless --serve is given")
    return args


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def print_summary(report: ScanReport) -> None:
    print(f"=== Hidden field scan ({report.scan_level.value}) ===")
    print(f"[*] Target: {report.url}")
    if report.error:
        print(f"[!] {report.error}")
    if report.findings:
        for finding in report.findings:
            name = finding.name or "<unnamed>"
            print(f" - {name} [{finding.type}] :: {finding.description} @ {finding.location}")
            print(f"   {finding.selector}")
    else:
        print(" - No hidden fields found.")
    print(f"[+] Risk level: {report.risk_level.value}")
    for recommendation in report.assessment.recommendations:
        print(f"   * {recommendation}")


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    configure_logging(args.verbose)
    config = load_configuration(
        headless=False if args.headed else None,
        include_explicit_hidden=args.include_explicit_hidden,
        port=args.port,
    )

    if args.serve:
        server = ScanServer(config)
        server.start()
        host, port = server.address
        print(f"[+] Listening on http://{host}:{port} (POST /scan)")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
        finally:
            server.stop()
        return 0

    try:
        report = run_scan(args.url, args.level, config=config)
    except InputError as exc:
        for error in exc.errors:
            print(f"[!] {error.get('message')}", file=sys.stderr)
        return 2

    if args.report:
        report_path = Path(args.report).resolve()
        report.save(report_path)
        print(f"[+] Report saved to {report_path}")

    if args.json:
        print(report.to_json())
    else:
        print_summary(report)
    return 0


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
