"""
Command-line interface for snippet content.

Provides CLI commands for checking and exercising snippet data:
- check: Load all snippet files and print per-category counts
- expand: Expand <category> tags in a string
- list: List the identified snippets of a category
- migrate: Resolve a legacy text hash to a snippet id

Usage:
    snippets [--root DIR] check
    snippets [--root DIR] expand TEXT [--seed N]
    snippets [--root DIR] list CATEGORY [--null]
    snippets [--root DIR] migrate HASH

--root is a global option and goes before the command name.

Environment Variables:
    SNIPPETS_ROOT: Content directory (default: data/snippets)
    SNIPPETS_LOG_LEVEL: Log level (default: INFO)
"""

import argparse
import logging
import random
import sys

from text_snippets.config import config, log_format
from text_snippets.content import load_snippet_directory
from text_snippets.errors import SnippetLoadError
from text_snippets.ids import SnippetId
from text_snippets.registry import SnippetLibrary


def _load_library(args: argparse.Namespace) -> SnippetLibrary | None:
    """
    Build a library from the content root named on the command line.

    Returns:
        The loaded library, or None if loading failed (error already printed).
    """
    root = args.root or config.content.absolute_root
    rng = random.Random(args.seed) if getattr(args, "seed", None) is not None else None
    library = SnippetLibrary(rng=rng)
    try:
        load_snippet_directory(library, root, suffixes=config.content.extensions)
    except (FileNotFoundError, SnippetLoadError) as e:
        print(f"Error loading snippets: {e}", file=sys.stderr)
        return None
    return library


def cmd_check(args: argparse.Namespace) -> int:
    """
    Load all snippet content and print a summary.

    Returns:
        0 on success, 1 on load error
    """
    library = _load_library(args)
    if library is None:
        return 1

    for category in library.categories():
        with_id, without_id = library.category_size(category)
        print(f"{category}: {with_id} with id, {without_id} anonymous")
    print(f"{len(library.categories())} categories, {len(library)} identified snippets.")
    return 0


def cmd_expand(args: argparse.Namespace) -> int:
    """
    Expand tags in the given text and print the result.

    Returns:
        0 on success, 1 on load error
    """
    library = _load_library(args)
    if library is None:
        return 1
    print(library.expand(args.text))
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """
    Print the identified snippets of a category, one per line.

    Returns:
        0 on success, 1 on load error or unknown category
    """
    library = _load_library(args)
    if library is None:
        return 1
    if not library.has_category(args.category):
        print(f"Unknown category: {args.category}", file=sys.stderr)
        return 1
    for snippet_id, text in library.list_by_category(args.category, add_null_id=args.null):
        print(f"{snippet_id.value or '(none)'}\t{text}")
    return 0


def cmd_migrate(args: argparse.Namespace) -> int:
    """
    Print the snippet id that a legacy text hash maps to.

    Returns:
        0 if a snippet matched, 1 otherwise
    """
    library = _load_library(args)
    if library is None:
        return 1
    snippet_id: SnippetId = library.migrate_hash_to_id(args.hash)
    if snippet_id.is_null():
        print(f"No snippet matches hash {args.hash}", file=sys.stderr)
        return 1
    print(snippet_id.value)
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="snippets",
        description="Inspect and exercise text snippet content",
    )
    parser.add_argument(
        "--root",
        type=str,
        help="Snippet content directory (default: data/snippets, or SNIPPETS_ROOT env var)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser(
        "check",
        help="Load all snippet files and report per-category counts",
    )
    check_parser.set_defaults(func=cmd_check)

    expand_parser = subparsers.add_parser(
        "expand",
        help="Expand <category> tags in a string",
    )
    expand_parser.add_argument("text", help="Text containing <category> tags")
    expand_parser.add_argument(
        "--seed",
        type=int,
        help="Seed for reproducible expansion",
    )
    expand_parser.set_defaults(func=cmd_expand)

    list_parser = subparsers.add_parser(
        "list",
        help="List identified snippets in a category",
    )
    list_parser.add_argument("category", help="Category name, e.g. '<greeting>'")
    list_parser.add_argument(
        "--null",
        action="store_true",
        help="Include the leading 'no selection' entry",
    )
    list_parser.set_defaults(func=cmd_list)

    migrate_parser = subparsers.add_parser(
        "migrate",
        help="Resolve a legacy text hash to a snippet id",
    )
    migrate_parser.add_argument("hash", type=int, help="Legacy integer hash")
    migrate_parser.set_defaults(func=cmd_migrate)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(level=config.logging.level, format=log_format(config.logging))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
