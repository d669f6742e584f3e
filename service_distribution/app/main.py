"""
Command line entry point for the Distribution service.

Loads the city catalog, collects distributor permissions (from a YAML file
or interactively), evaluates every city against every distributor and
prints one decision per pair.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from shared.config import DistributionConfig, get_config
from shared.logging import configure_logging, get_logger, set_run_id, clear_context
from shared.errors import (
    CatalogError, CyclicHierarchyError, DistributionException, RuleRequestError, ValidationError
)
from shared.metrics import get_metrics_collector

from .catalog.csv_loader import load_cities
from .driver import EvaluationDriver
from .intake.builder import build_rule_sets
from .intake.file_loader import load_rule_requests
from .intake.prompt import collect_from_prompt
from .reporting.sinks import build_sink
from .rules.engine import PermissionEvaluator
from .rules.models import PermissionRequest

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_HIERARCHY_ERROR = 2
EXIT_INTERRUPTED = 130


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check distributor permissions for every city in a catalog.")
    parser.add_argument("--catalog", type=Path, default=None, help="Path to the city catalog CSV")
    parser.add_argument("--rules", type=Path, default=None, help="YAML file with distributor permissions; prompt when omitted")
    parser.add_argument("--distributors", type=int, default=None, help="Number of distributors to prompt for")
    parser.add_argument("--format", dest="report_format", choices=["text", "json"], default=None, help="Report format")
    parser.add_argument("--continue-on-error", action="store_true", default=None, help="Report unaffected pairs when a hierarchy is cyclic")
    parser.add_argument("--log-level", default=None, help="Log level (debug, info, warning, error)")
    return parser.parse_args(argv)


def _load_requests(config: DistributionConfig, rules_path: Optional[Path]) -> List[PermissionRequest]:
    if rules_path is not None:
        return load_rule_requests(rules_path)
    return collect_from_prompt(config.prompt_distributors)


def run(config: DistributionConfig, rules_path: Optional[Path] = None, stdout: Optional[TextIO] = None) -> int:
    """Run one full evaluation and return the process exit status."""
    logger = get_logger("distribution.main")
    stdout = stdout if stdout is not None else sys.stdout
    run_id = set_run_id()

    try:
        sink = build_sink(config.report_format, stdout)
        cities = load_cities(config.catalog_path, config.catalog_header_token)
        rule_sets = build_rule_sets(_load_requests(config, rules_path))
    except (CatalogError, RuleRequestError, ValidationError) as e:
        logger.error("Input error", code=e.code, error=e.message, details=e.details)
        print(f"Error loading input: {e.message}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    driver = EvaluationDriver(
        evaluator=PermissionEvaluator(max_depth=config.max_hierarchy_depth),
        sink=sink,
        continue_on_error=config.continue_on_error,
        metrics=get_metrics_collector("distribution"),
    )

    try:
        result = driver.run_all(cities, rule_sets)
    except CyclicHierarchyError as e:
        logger.error("Hierarchy error", distributor=e.distributor_name, chain=e.chain)
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_HIERARCHY_ERROR
    finally:
        clear_context()

    if result.failures:
        reported = set()
        for failure in result.failures:
            if failure.distributor_name in reported:
                continue
            reported.add(failure.distributor_name)
            message = failure.error.message if isinstance(failure.error, DistributionException) else str(failure.error)
            print(f"Error: {message}", file=sys.stderr)
        return EXIT_HIERARCHY_ERROR

    logger.info("Run complete", run_id=run_id, records=len(result))
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        config = get_config(
            catalog_path=str(args.catalog) if args.catalog else None,
            prompt_distributors=args.distributors,
            report_format=args.report_format,
            continue_on_error=args.continue_on_error,
            log_level=args.log_level,
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    configure_logging("distribution", config.log_level)

    try:
        return run(config, args.rules)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    raise SystemExit(main())
