"""CLI entry point for PR analysis.

Usage:
  analyze-pr <pr_number> [--yes] [--replay FIXTURE.yaml]
"""

from __future__ import annotations

import asyncio
import sys

from src.cli.common import (
    CliParser,
    add_common_arguments,
    check_required_tools,
    load_config_or_report,
    print_status,
    print_transition,
    resolve_dependencies,
    setup_environment,
)
from src.execution.fixtures import FixtureError
from src.execution.registry import Dependencies
from src.services.github import validate_pr_number
from src.workflow.convenience import create_runner, create_services
from src.workflow.models import FailureReason

DESCRIPTION = """\
Gathers PR and Jira data, analyzes the PR against its ticket with the Claude
CLI, and optionally posts the analysis as a PR comment.

Requires gh (authenticated). jira and claude are optional: without claude
the prompt is saved to the temp directory for manual use."""


def build_parser() -> CliParser:
    parser = CliParser(prog="analyze-pr", description=DESCRIPTION)
    parser.add_argument("pr_number", help="The GitHub pull request number to analyze")
    add_common_arguments(parser)
    return parser


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

    return asyncio.run(_analyze(args, config, deps))


async def _analyze(args, config, deps: Dependencies) -> int:
    services = create_services(config, deps)
    tools = await check_required_tools(services)
    if not tools.github:
        print_status("red", "Error: GitHub CLI (gh) is required but not available", file=sys.stderr)
        print_status(
            "yellow",
            "Please install and authenticate GitHub CLI: https://cli.github.com/",
            file=sys.stderr,
        )
        return 1
    if not tools.jira:
        print_status("yellow", "Warning: Jira CLI not available - Jira integration will be limited")
    if not tools.claude:
        print_status(
            "yellow",
            "Warning: Claude CLI not available - analysis will be saved as prompt file",
        )

    print_status("green", f"Starting Smart PR Analysis for #{args.pr_number}")
    print_status("green", "=" * 50)

    runner = create_runner(config, deps, auto_confirm=args.yes)
    result = await runner.run(args.pr_number, on_transition=print_transition)

    if not result.success:
        step = result.failed_at.value.replace("_", " ") if result.failed_at else "unknown step"
        print_status("red", f"Analysis failed while {step}: {result.message}", file=sys.stderr)
        if result.failure_reason is FailureReason.SERVICE_ERROR and result.error is not None:
            print_status("red", f"  {result.error.format()}", file=sys.stderr)
        if result.prompt_file is not None:
            print_status("yellow", f"Prompt saved to: {result.prompt_file}")
            print_status(
                "yellow",
                "You can manually run this prompt through Claude CLI or Web interface",
            )
        return 1

    print_status("green", f"Ticket: {result.context.ticket_id}")
    print_status("green", f"Analysis saved to: {result.analysis_file}")
    if result.published:
        print_status("green", "Analysis posted as PR comment!")
        print_status("blue", f"View the comment at: {config.github.pr_url(args.pr_number)}")
    else:
        print_status("yellow", "Analysis not posted")
    print_status("green", f"PR Analysis completed successfully! ({result.duration_seconds:.2f}s)")
    return 0


def entry() -> None:
    setup_environment()
    sys.exit(main())


if __name__ == "__main__":
    entry()
