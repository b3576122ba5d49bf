"""Interactive read-eval-print loop over the assistant."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from crossplane_ai.utils.errors import CrossplaneAIError
from crossplane_ai.utils.formatting import render_analysis, render_records, render_suggestions

if TYPE_CHECKING:
    from crossplane_ai.commands import Session

logger = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"exit", "quit", "q"})

HELP_TEXT = """Available commands:
  <question>        Ask anything, e.g. 'what AWS resources do I have?'
  analyze           Detailed resource analysis
  status            Resource status overview
  health            Health check (includes resources without readiness)
  suggest [type]    Suggestions: database, security, optimize, network
  help              Show this help message
  exit, quit, q     Leave interactive mode"""

PROMPT = "crossplane-ai> "


class InteractiveShell:
    """Line-oriented shell. Each line runs one discovery pass and one response."""

    def __init__(
        self,
        session: Session,
        read_line: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self._session = session
        self._read_line = read_line
        self._write = write

    def run(self, analyze_first: bool = False) -> int:
        """Run until an exit command or end of input."""
        self._write("Welcome to Crossplane AI interactive mode.")
        self._write(HELP_TEXT)

        if analyze_first:
            self.handle("analyze")

        while True:
            try:
                line = self._read_line(PROMPT)
            except (EOFError, KeyboardInterrupt):
                break

            if not self.handle(line):
                break

        self._write("Goodbye!")
        return 0

    def handle(self, line: str) -> bool:
        """Process one input line. Returns False when the shell should exit."""
        text = line.strip()
        if not text:
            return True

        lowered = text.lower()
        if lowered in EXIT_COMMANDS:
            return False

        first, _, rest = lowered.partition(" ")
        command = lowered if first != "suggest" else first

        try:
            if command in ("help", "?"):
                self._write(HELP_TEXT)
            elif command == "analyze":
                self._write(render_analysis(self._session.assistant.analyze(self._session.discover())))
            elif command == "health":
                result = self._session.assistant.analyze(self._session.discover(), health_check=True)
                self._write(render_analysis(result, summary_only=True))
            elif command == "status":
                self._write(render_records(self._session.discover()))
            elif command == "suggest":
                category = rest.strip() or None
                suggestions = self._session.assistant.suggest(
                    category,
                    self._session.discover(),
                    limit=self._session.config.max_suggestions,
                )
                self._write(render_suggestions(suggestions))
            else:
                self._write(self._session.assistant.ask(text, self._session.discover()))
        except CrossplaneAIError as e:
            logger.debug(f"Interactive command failed: {e}")
            self._write(f"Error: {e.message}")

        self._write("")
        return True
