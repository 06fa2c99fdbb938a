"""
linkedart <URL> [--log] [--save FILE] [--depth N] [--no-resolve] [--path PATH]

Prints the extracted descriptive fields and the complete parsed structure
of a Linked Art document; --save writes the parsed tree as YAML.
"""

import argparse
import logging
import sys
import threading
from typing import Any, Dict, List, Optional

import yaml

from linkedart.analyzer.orchestrator import analyze_document
from linkedart.analyzer.parser import (
    format_parsed_entity,
    get_parsed_entity_stats,
    get_property_by_path,
    parse_entity,
)
from linkedart.config import configure_logging, get_settings
from linkedart.models.log_messages import LogMessages
from linkedart.models.parsed import VisitedSet
from linkedart.services.fetcher import (
    AnalysisCancelled,
    FetchError,
    HttpFetcher,
    MemoizedFetcher,
    fetch_json,
)
from linkedart.utils.uris import expand_numeric_ids

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_CANCELLED = 130

RULE = "=" * 80


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkedart",
        description="Analyze a Linked Art JSON-LD document."
    )
    parser.add_argument("url", help="URL of the Linked Art document")
    parser.add_argument("--log", action="store_true", help="show detailed log messages")
    parser.add_argument("--save", metavar="FILE", help="save the parsed tree to a YAML file")
    parser.add_argument(
        "--depth",
        type=int,
        default=get_settings().max_depth,
        help="maximum recursion depth (default: %(default)s)"
    )
    parser.add_argument(
        "--no-resolve",
        dest="resolve",
        action="store_false",
        help="don't resolve external references"
    )
    parser.add_argument(
        "--path",
        help="print only the parsed value at a property path, e.g. identified_by[0].content"
    )
    return parser


# --------------------------------------------------
# Run
# --------------------------------------------------

def run(args: argparse.Namespace, fetcher: HttpFetcher, log_messages: LogMessages) -> Dict[str, Any]:
    data = expand_numeric_ids(fetch_json(fetcher, args.url), log_messages)

    print("Parsing entity...")
    parsed = parse_entity(
        data,
        fetcher,
        log_messages,
        resolve_references=args.resolve,
        max_depth=args.depth,
        current_depth=0,
        visited=VisitedSet(),
    )

    print("Extracting fields...")
    analysis = analyze_document(data, args.url, MemoizedFetcher(fetcher), log_messages)

    return {"parsed": parsed, "analysis": analysis}


def run_cancellable(args: argparse.Namespace, fetcher: HttpFetcher, log_messages: LogMessages) -> Dict[str, Any]:
    """
    Run in a worker thread so Ctrl-C can cancel in-flight fetches.
    """
    outcome: Dict[str, Any] = {}

    def target():
        try:
            outcome["value"] = run(args, fetcher, log_messages)
        except BaseException as e:
            outcome["error"] = e

    worker = threading.Thread(target=target, daemon=True)
    worker.start()

    try:
        while worker.is_alive():
            worker.join(0.2)
    except KeyboardInterrupt:
        fetcher.cancel()
        worker.join(fetcher.timeout)
        raise AnalysisCancelled()

    if "error" in outcome:
        raise outcome["error"]

    return outcome["value"]


# --------------------------------------------------
# Output
# --------------------------------------------------

def print_fields(results: Dict[str, List[str]]):
    print("FIELDS")
    print("------")
    for field_name, values in results.items():
        if len(values) == 1:
            print(f"{field_name}: {values[0]}")
        else:
            print(f"{field_name}:")
            for value in values:
                print(f"  - {value}")
    print()


def print_structure(parsed, stats: Optional[Dict[str, Any]]):
    if stats:
        print("SUMMARY")
        print("-------")
        print(f"Entity Type: {stats['type']}")
        print(f"Label: {stats['label'] or '(unnamed)'}")
        print(f"ID: {stats['id'] or '(none)'}")
        print(f"Properties: {stats['property_count']}")
        print(f"Nested Entities: {stats['nested_entity_count']}")
        print(f"Has External References: {'Yes' if stats['has_references'] else 'No'}")
        print()

        print("PROPERTIES")
        print("----------")
        for name in stats["property_names"]:
            print(f"  - {name}")
        print()

    print("COMPLETE STRUCTURE")
    print("------------------")
    print()
    print(format_parsed_entity(parsed))


def print_path(parsed, path: str):
    print(f"PATH: {path}")
    print("-" * (len(path) + 6))

    node = get_property_by_path(parsed, path)
    if node is None:
        print("(no value at this path)")
    else:
        print(format_parsed_entity(node))
    print()


def print_log(log_messages: LogMessages, verbose: bool):
    if not len(log_messages):
        return

    print()
    if verbose:
        print("LOG MESSAGES")
        print("------------")
        for message in log_messages:
            print(f"  - {message}")
    else:
        print(f"{len(log_messages)} issue(s) logged. Use --log to view details.")


def save_yaml(parsed, filename: str):
    with open(filename, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            parsed.to_dict(),
            f,
            allow_unicode=True,
            sort_keys=False,
            width=float("inf")
        )


# --------------------------------------------------
# Entry point
# --------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging("DEBUG" if args.log else "WARNING")

    print(f"Fetching Linked Art data from {args.url}...")
    print(f"Max recursion depth: {args.depth}")
    print(f"Resolve references: {args.resolve}")
    print()

    fetcher = HttpFetcher()
    log_messages = LogMessages()

    try:
        outcome = run_cancellable(args, fetcher, log_messages)

    except AnalysisCancelled as e:
        print(f"\nCancelled: {e}", file=sys.stderr)
        return EXIT_CANCELLED

    except FetchError as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        if args.log:
            logger.exception("Fetch failed")
        return EXIT_ERROR

    except Exception as e:
        logger.exception("🔥 CLI HARD FAILURE")
        print(f"\nERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    parsed = outcome["parsed"]
    analysis = outcome["analysis"]

    print()
    print(RULE)
    print("LINKED ART ENTITY ANALYSIS")
    print(RULE)
    print()

    print_fields(analysis.get("results", {}))
    if args.path:
        print_path(parsed, args.path)
    else:
        print_structure(parsed, get_parsed_entity_stats(parsed))
    print_log(log_messages, args.log)

    if args.save:
        try:
            save_yaml(parsed, args.save)
            print(f"Results saved to {args.save}")
        except (OSError, yaml.YAMLError) as e:
            print(f"Failed to save results: {e}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
