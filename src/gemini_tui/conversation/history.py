# src/gemini_tui/conversation/history.py
import logging
from typing import Iterator, List, Sequence, Tuple

from .types import Turn

logger = logging.getLogger(__name__)


class HistoryConflictError(ValueError):
    """Raised when a proposed history does not extend the committed one."""


class ConversationHistory:
    """
    Append-only, in-memory log of turns for the lifetime of a session.

    Turns are never rewritten or removed. Readers get immutable snapshots;
    a streaming cycle hands back a *proposed* history which is committed only
    if it extends the current one.
    """

    def __init__(self) -> None:
        self._turns: List[Turn] = []

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)
        logger.debug(f"ConversationHistory: appended '{turn.role}' turn with {len(turn.parts)} part(s); size={len(self._turns)}.")

    def snapshot(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def commit(self, proposed: Sequence[Turn]) -> int:
        """
        Adopt `proposed` as the new history by appending its tail.

        Returns the number of turns appended. Raises HistoryConflictError if
        `proposed` is shorter than, or diverges from, the committed turns.
        """
        current_len = len(self._turns)
        if len(proposed) < current_len or list(proposed[:current_len]) != self._turns:
            raise HistoryConflictError(
                f"Proposed history ({len(proposed)} turns) does not extend the committed history ({current_len} turns)."
            )
        new_turns = list(proposed[current_len:])
        for turn in new_turns:
            self.append(turn)
        return len(new_turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.snapshot())

    def __getitem__(self, index: int) -> Turn:
        return self._turns[index]
