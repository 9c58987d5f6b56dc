#!/usr/bin/env python3
"""
Sparks - personal idea capture.

Command-line entry point:
  - Capture raw text into a structured idea (optionally saving it)
  - List stored ideas with filters, search and sorting
  - Serve the JSON API

Usage:
    python main.py capture "call the bank before friday"
    python main.py capture "..." --save --accept-category
    python main.py list --status active --sort priority
    python main.py serve --port 5001
    python main.py --show-config
"""

import argparse
import sys

from sparks import __version__
from sparks.capture import CaptureWorkflow, Draft
from sparks.config import print_config_summary, validate_config
from sparks.errors import SparksError, user_message
from sparks.logging_setup import configure_logging
from sparks.models.idea import PRIORITIES, STATUSES
from sparks.services import CompletionClient, IdeaNormalizer
from sparks.storage import build_storage
from sparks.views.filters import SORT_ORDERS, ViewFilters, derive_view


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="sparks",
        description="Capture, organize and browse ideas.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s capture "renew passport before the trip"    Preview a structured idea
  %(prog)s capture "..." --save                         Store it as an active idea
  %(prog)s list                                         Active ideas, newest first
  %(prog)s list --status archived --search travel       Search archived ideas
  %(prog)s serve --port 5001                            Run the JSON API
        """,
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # capture
    capture = subparsers.add_parser("capture", help="Turn raw text into a structured idea")
    capture.add_argument("text", help="Raw text to capture (use - to read stdin)")
    capture.add_argument(
        "--save",
        action="store_true",
        help="Store the suggestion as a new idea",
    )
    capture.add_argument(
        "--accept-category",
        action="store_true",
        help="Create the suggested category if it is new",
    )

    # list
    list_cmd = subparsers.add_parser("list", help="List stored ideas")
    list_cmd.add_argument("--category", help="Only this category")
    list_cmd.add_argument(
        "--status",
        choices=STATUSES + ("all",),
        default="active",
        help="Only this status (default: active)",
    )
    list_cmd.add_argument("--priority", choices=PRIORITIES, help="Only this priority")
    list_cmd.add_argument(
        "--sort",
        choices=SORT_ORDERS,
        default="newest",
        help="Sort order (default: newest)",
    )
    list_cmd.add_argument("--search", "-s", default="", help="Search title, summary and tags")

    # serve
    serve = subparsers.add_parser("serve", help="Run the JSON API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=5001, help="Port (default: 5001)")
    serve.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Sparks Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def build_workflow() -> CaptureWorkflow:
    """Construct the store and normalizer once for this process."""
    return CaptureWorkflow(build_storage(), IdeaNormalizer(CompletionClient()))


def print_draft(draft: Draft) -> None:
    result = draft.result
    marker = " (new)" if result.is_new_category else ""
    print(f"Title:    {result.title}")
    print(f"Summary:  {result.summary}")
    print(f"Category: {result.category}{marker}")
    print(f"Tags:     {', '.join(result.tags) or '(none)'}")
    print(f"Priority: {result.priority}")


def run_capture(workflow: CaptureWorkflow, args) -> int:
    text = sys.stdin.read() if args.text == "-" else args.text
    draft = workflow.create_draft(text)
    print_draft(draft)

    result = draft.result
    if args.accept_category and result.is_new_category and result.category:
        category = workflow.accept_category(result.category)
        print(f"\n✓ Created category: {category.name}")

    if args.save:
        idea = workflow.confirm_idea({
            "raw_input": draft.raw_input,
            "title": result.title,
            "summary": result.summary,
            "category": result.category,
            "tags": result.tags,
            "priority": result.priority,
        })
        print(f"\n✓ Saved idea {idea.id}")

    return 0


def run_list(workflow: CaptureWorkflow, args) -> int:
    status = None if args.status == "all" else args.status
    filters = ViewFilters(
        category=args.category,
        status=status,
        priority=args.priority,
        sort=args.sort,
    )
    ideas = derive_view(workflow.list_ideas(filters), filters, args.search)

    if not ideas:
        print("No ideas match your filters.")
        return 0

    for idea in ideas:
        created = idea.created_at.strftime("%Y-%m-%d")
        tags = f"  #{' #'.join(idea.tags)}" if idea.tags else ""
        print(f"{created}  [{idea.priority:<9}] {idea.title}  ({idea.category}){tags}")
        print(f"            {idea.id}")

    print(f"\n{len(ideas)} idea(s)")
    return 0


def run_serve(args) -> int:
    from web.app import create_app

    create_app().run(host=args.host, port=args.port, debug=args.debug)
    return 0


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = error, 2 = usage).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else None)

    if args.show_config:
        show_config()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    try:
        if args.command == "serve":
            return run_serve(args)

        workflow = build_workflow()
        if args.command == "capture":
            return run_capture(workflow, args)
        return run_list(workflow, args)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except SparksError as e:
        print(f"\n❌ {user_message(e)}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
