"""Detection and parsing of ``@lookout`` commands in chat input."""

import re
from collections.abc import Sequence

from models.lookout import LookoutCommand

TRIGGER_TOKEN = "@lookout"
CONTEXT_SEPARATOR = "\n\n"

# Trigger at the very start, at least one whitespace, then the rest (newlines included)
_COMMAND_PATTERN = re.compile(rf"^{re.escape(TRIGGER_TOKEN)}\s+(.+)$", re.IGNORECASE | re.DOTALL)


class CommandDetector:
    """Stateless parser for the lookout trigger; all methods are pure."""

    def detect(self, text: str, context_snippets: Sequence[str] = ()) -> LookoutCommand:
        """
        Detect a lookout command and extract its question.

        Args:
            text: Raw chat input
            context_snippets: Highlighted text snippets, in selection order

        Returns:
            LookoutCommand; ``is_command`` is False for anything that is not
            the trigger followed by a non-empty question.
        """
        question = self.extract_question(text)
        if not question:
            return LookoutCommand(is_command=False, question="")

        highlighted_context = CONTEXT_SEPARATOR.join(context_snippets) if context_snippets else None
        return LookoutCommand(
            is_command=True, question=question, highlighted_context=highlighted_context
        )

    def is_valid(self, text: str) -> bool:
        return bool(self.extract_question(text))

    def extract_question(self, text: str) -> str:
        """Return the question after the trigger, or "" when ``text`` is not a command."""
        match = _COMMAND_PATTERN.match((text or "").strip())
        if not match:
            return ""
        return match.group(1).strip()


_detector = CommandDetector()


def detect_lookout_command(text: str, context_snippets: Sequence[str] = ()) -> LookoutCommand:
    return _detector.detect(text, context_snippets)


def is_valid_lookout_command(text: str) -> bool:
    return _detector.is_valid(text)


def extract_question(text: str) -> str:
    return _detector.extract_question(text)
