"""Console prompter that reads y/n confirmations from stdin."""

from __future__ import annotations

import asyncio


class ConsolePrompter:
    async def confirm(self, question: str, default: bool = False) -> bool:
        hint = "Y/n" if default else "y/N"
        try:
            answer = await asyncio.to_thread(input, f"{question} ({hint}): ")
        except EOFError:
            return default
        answer = answer.strip()
        if not answer:
            return default
        return answer.lower().startswith("y")
