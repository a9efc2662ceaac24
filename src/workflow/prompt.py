"""Builds the analysis prompt from PR and ticket data."""

from __future__ import annotations

from src.services.github import PRData

_INSTRUCTIONS = """\
## Analysis Request

IMPORTANT: Before analyzing, please first gather context by:

1. **Examine the diff** to identify all unique files that were modified
2. **Read the modified files** to understand the current codebase context
3. **Read any files referenced** in the modified files (imports, dependencies, related classes, etc.) to understand the broader context
4. **Use search tools** to find related functionality if needed

Once you have gathered sufficient context, provide a comprehensive analysis comparing the PR changes against the Jira ticket requirements. Your analysis should include:

1. **Context Summary**: Brief overview of the codebase area being modified
2. **Ticket Summary**: Brief summary of the issue from Jira
3. **PR Solution Analysis**: How the PR addresses the issue with full context
4. **Code Quality Assessment**: Review of the implementation approach and patterns used
5. **Confidence Level**: How confident you are this solves the problem (with percentage)
6. **Recommendations**: Follow-up tasks and testing suggestions

Format your response as a GitHub comment that can be posted directly to the PR. Use markdown formatting and include:
- Clear section headers
- Bullet points for key findings
- Confidence assessment with reasoning
- Actionable recommendations

Make the analysis thorough but concise, focusing on whether the PR actually solves the problem described in the Jira ticket with proper understanding of the codebase context."""


def build_analysis_prompt(
    pr_number: str,
    ticket_id: str,
    pr_data: PRData,
    ticket_data: str,
    model_label: str,
) -> str:
    meta = pr_data.metadata
    return f"""\
I need you to analyze a GitHub pull request against its associated Jira ticket and provide a comprehensive analysis.

## Pull Request #{pr_number}

### PR Details:
{pr_data.view}

### PR Changes (diff):
{pr_data.diff}

### PR Metadata:
- Title: {meta.title}
- Author: {meta.author}
- State: {meta.state}
- Additions: {meta.additions}
- Deletions: {meta.deletions}
- URL: {meta.url}

## Jira Ticket {ticket_id}

### Ticket Details:
{ticket_data}

{_INSTRUCTIONS}

IMPORTANT: End your analysis with the following attribution:
---
*This analysis was generated using AI with the Claude CLI and {model_label}*"""
