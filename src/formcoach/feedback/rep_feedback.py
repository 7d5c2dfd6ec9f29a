from typing import List, Optional

PERFECT_REP_QUALITY = 80
GOOD_REP_QUALITY = 60


def rep_feedback(quality: float) -> str:
    """Message shown when a repetition is accepted, tiered by its quality."""
    if quality >= PERFECT_REP_QUALITY:
        return "Perfect rep!"
    if quality >= GOOD_REP_QUALITY:
        return "Good rep!"
    return "Valid rep, but review your technique"


class FeedbackLog:
    """
    Most-recent-first list of messages for the user, without repeats at the head.

    Form feedback keeps up to `max_items` entries. Rep announcements and
    positioning messages keep one fewer, so they push out older form cues
    faster.
    """

    def __init__(self, max_items: int = 4):
        if max_items < 1:
            raise ValueError(f"max_items must be at least 1, got {max_items}")
        self.max_items = max_items
        self.short_items = max(max_items - 1, 1)
        self._messages: List[str] = []

    def push(self, message: Optional[str], short: bool = False) -> bool:
        """Add a message unless it is already the newest one. Returns True if added."""
        if not message:
            return False
        if self._messages and self._messages[0] == message:
            return False
        self._prepend(message, self.short_items if short else self.max_items)
        return True

    def push_rep(self, quality: float) -> str:
        # Rep announcements always go to the head, even if repeated
        message = rep_feedback(quality)
        self._prepend(message, self.short_items)
        return message

    def _prepend(self, message: str, limit: int) -> None:
        self._messages = [message] + self._messages[:limit - 1]

    @property
    def latest(self) -> Optional[str]:
        return self._messages[0] if self._messages else None

    @property
    def messages(self) -> List[str]:
        return list(self._messages)

    def clear(self) -> None:
        self._messages = []
