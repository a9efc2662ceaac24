"""CLI entry point for posting a file as a PR comment.

Usage:
  comment-pr <pr_number> <file> [--yes] [--replay FIXTURE.yaml]
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from src.cli.common import (
    CliParser,
    add_common_arguments,
    load_config_or_report,
    print_status,
    print_transition,
    probe,
    resolve_dependencies,
    setup_environment,
)
from src.execution.fixtures import FixtureError
from src.execution.registry import Dependencies
from src.services.github import GitHubService, validate_pr_number
from src.workflow.comment_file import CommentFile, preview
from src.workflow.convenience import operation_options, run_publish

DESCRIPTION = """\
Posts a file (plain text or markdown) as a comment on a GitHub pull request.
Validates the PR and the file, previews the content and asks for
confirmation before posting. Pairs with analyze-pr."""


def build_parser() -> CliParser:
    parser = CliParser(prog="comment-pr", description=DESCRIPTION)
    parser.add_argument("pr_number", help="The GitHub pull request number to comment on")
    parser.add_argument("file", type=Path, help="File containing the comment body")
    add_common_arguments(parser)
    return parser


def show_preview(checked: CommentFile) -> None:
    for warning in checked.warnings:
        print_status("yellow", f"Warning: {warning}")
    print_status("green", f"File validated ({checked.size_kb}KB)")
    print("\nFile Preview:")
    print("-" * 60)
    print(preview(checked.path))
    print("-" * 60)


def main(argv: list[str] | None = None, deps: Dependencies | None = None) -> int:
    args = build_parser().parse_args(argv)

    if not validate_pr_number(args.pr_number):
        print_status("red", "Error: PR number must be numeric", file=sys.stderr)
        return 1

    config = load_config_or_report()
    if config is None:
        return 1

    try:
        deps = resolve_dependencies(deps, args.replay)
    except (OSError, FixtureError) as e:
        print_status("red", f"Error: Cannot load replay fixture: {e}", file=sys.stderr)
        return 1

    return asyncio.run(_comment(args, config, deps))


async def _comment(args, config, deps: Dependencies) -> int:
    github = GitHubService(deps, options=operation_options(config))
    if not await probe(github.check_cli()):
        print_status("red", "Error: GitHub CLI (gh) is required but not available", file=sys.stderr)
        print_status(
            "yellow",
            "Please install and authenticate GitHub CLI: https://cli.github.com/",
            file=sys.stderr,
        )
        return 1

    print_status("green", f"Starting PR Comment Posting for #{args.pr_number}")
    print_status("green", "=" * 50)

    result = await run_publish(
        args.pr_number,
        args.file.resolve(),
        config=config,
        deps=deps,
        auto_confirm=args.yes,
        on_preview=show_preview,
        on_transition=print_transition,
    )

    if not result.success:
        print_status("red", f"Error: {result.message}", file=sys.stderr)
        if result.error is not None:
            print_status("red", f"  {result.error.format()}", file=sys.stderr)
        return 1
    if not result.published:
        print_status("yellow", "Comment posting cancelled by user")
        return 1

    print_status("green", "Comment posted successfully!")
    print_status("blue", f"View the comment at: {config.github.pr_url(args.pr_number)}")
    return 0


def entry() -> None:
    setup_environment()
    sys.exit(main())


if __name__ == "__main__":
    entry()
