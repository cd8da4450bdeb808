from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml
from rich.console import Console
from rich.logging import RichHandler

from .config import RelocationSettings, load_settings
from .job_loader import load_request
from .orchestrator import relocate
from .summary_table import OutcomeTableRenderer
from .utils import env_bool, load_yaml_file
from .validation import format_report, validate_settings_data
from .version import __version__

LOGGER = logging.getLogger(__name__)

CONSOLE = Console()


def configure_logging(verbose: bool = False) -> None:
    env_verbose = env_bool("RELOCATOR_VERBOSE")
    level = logging.DEBUG if (verbose or env_verbose) else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )


def _load_settings(path: Optional[Path]) -> RelocationSettings:
    if path is None:
        return RelocationSettings()
    return load_settings(path)


def run_plan(args: argparse.Namespace) -> int:
    """Print the relocation decision for a job file without touching any files."""
    try:
        settings = _load_settings(args.config)
        request = load_request(args.job)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        LOGGER.error("Unable to load input: %s", exc)
        return 1

    outcome = relocate(request, settings, path_exists=lambda path: Path(path).is_dir())
    OutcomeTableRenderer(CONSOLE).print_outcome(request, outcome)
    return 0 if outcome.ok else 1


def run_validate_config(args: argparse.Namespace) -> int:
    try:
        data = load_yaml_file(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        LOGGER.error("Unable to load %s: %s", args.config, exc)
        return 1

    report = validate_settings_data(data)
    if report.errors or report.warnings:
        LOGGER.debug(format_report(report))
    OutcomeTableRenderer(CONSOLE).print_validation(report)
    return 0 if report.is_valid else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relocator",
        description="Decide new filenames and destination folders for media files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan = subparsers.add_parser("plan", help="Show the relocation decision for a job file")
    plan.add_argument("job", type=Path, help="YAML file describing the media file and its metadata")
    plan.add_argument(
        "--config",
        type=Path,
        default=Path(os.environ["RELOCATOR_CONFIG"]) if os.getenv("RELOCATOR_CONFIG") else None,
        help="Relocation settings YAML (defaults to $RELOCATOR_CONFIG, then built-in defaults)",
    )
    plan.set_defaults(handler=run_plan)

    validate = subparsers.add_parser("validate-config", help="Validate a relocation settings file")
    validate.add_argument("config", type=Path, help="Relocation settings YAML")
    validate.set_defaults(handler=run_validate_config)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
