import argparse
import logging
import sys
from typing import Dict, Any, List, Optional

from colorama import Fore, Style, init

from sharecheck import __version__
from sharecheck.config import Settings
from sharecheck.context import CheckContext
from sharecheck.engine import execute
from sharecheck.models import CheckDefinition
from sharecheck.reporting import ConsoleReporter, generate_json_report
from sharecheck.scenarios import ChecksFileError, load_checks

FLAG_ARGS = {
    # argparse dest -> options key
    "exists": "exists",
    "regex_match": "regex_match",
    "substring_match": "substring_match",
    "match": "match",
    "sha256": "sha256",
    "md5": "md5",
    "sha1": "sha1",
}

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sharecheck",
        description="Read a file from an SMB share and validate its contents.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument("-V", "--version", action="version", version=f"sharecheck {__version__}")

    target_group = parser.add_argument_group("Target")
    target_group.add_argument("--target", help="Host, optionally HOST:PORT (default port 445)")
    target_group.add_argument("--path", help="File path inside the share")
    target_group.add_argument("--expected", default="", help="Expected content, pattern or hex digest")
    target_group.add_argument("--username", default="")
    target_group.add_argument("--password", default="")
    target_group.add_argument("--domain", default="")
    target_group.add_argument("--share", default="")
    target_group.add_argument("--checks", help="YAML file with a list of check definitions")

    cmp_group = parser.add_argument_group("Comparison")
    cmp_group.add_argument("--exists", action="store_true", help="File must be non-empty")
    cmp_group.add_argument("--regex-match", action="store_true", help="Expected is a regular expression")
    cmp_group.add_argument("--substring-match", action="store_true", help="Expected must appear in the file")
    cmp_group.add_argument("--match", action="store_true", help="File must equal expected exactly")
    cmp_group.add_argument("--sha256", action="store_true")
    cmp_group.add_argument("--md5", action="store_true")
    cmp_group.add_argument("--sha1", action="store_true")

    out_group = parser.add_argument_group("Output")
    out_group.add_argument("--timeout", type=float, default=None, help="Per-check deadline in seconds")
    out_group.add_argument("--json-report", help="Path to JSON output")
    out_group.add_argument("--verbose", action="store_true")
    return parser

def checks_from_args(args) -> List[CheckDefinition]:
    options: Dict[str, Any] = {}
    if args.domain:
        options["domain"] = args.domain
    if args.share:
        options["share"] = args.share
    for dest, key in FLAG_ARGS.items():
        if getattr(args, dest):
            options[key] = True

    return [CheckDefinition(
        id="cli",
        target=args.target,
        path=args.path,
        expected=args.expected,
        username=args.username,
        password=args.password,
        options=options,
    )]

def main(argv: Optional[List[str]] = None) -> int:
    init(autoreset=True)
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    level = "DEBUG" if args.verbose else settings.log_level
    logging.basicConfig(level=getattr(logging, level, logging.WARNING),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if args.checks:
        try:
            checks = load_checks(args.checks)
        except ChecksFileError as e:
            print(f"{Fore.RED}[!] {e}{Style.RESET_ALL}")
            return 2
    elif args.target and args.path:
        checks = checks_from_args(args)
    else:
        parser.print_usage()
        print("error: either --checks or both --target and --path are required")
        return 2

    timeout = args.timeout if args.timeout is not None else settings.timeout
    reporter = ConsoleReporter()
    results = []

    for check in checks:
        with CheckContext.with_timeout(timeout) as ctx:
            result = execute(ctx, check.target, check.path, check.expected,
                             check.username, check.password, check.options, settings=settings)
        reporter.print_result(check, result)
        results.append((check, result))

    if len(results) > 1:
        reporter.print_summary(results)

    if args.json_report:
        try:
            generate_json_report(results, args.json_report)
        except OSError as e:
            print(f"{Fore.RED}Failed to write JSON report: {e}{Style.RESET_ALL}")
            return 2

    return 0 if all(r.success for _, r in results) else 1

if __name__ == "__main__":
    sys.exit(main())
