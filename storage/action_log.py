"""Linear undo/redo action log.

The log is an ordered tuple of committed commands plus a cursor in
``[0, len(commands)]``. Commands before the cursor are applied; the rest are
redoable. Appending while the cursor is not at the end discards the redoable
tail, so there is no redo tree.

The log is immutable: every operation returns a new ``ActionLog``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from schemas.commands import Command

# Save-point value for "no command applied yet". Command ids are never empty.
NO_COMMANDS = ""


@dataclass(frozen=True)
class ActionLog:
    commands: Tuple[Command, ...] = ()
    cursor: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.cursor <= len(self.commands):
            raise ValueError(
                f"cursor {self.cursor} outside [0, {len(self.commands)}]"
            )

    def __len__(self) -> int:
        return len(self.commands)

    def can_undo(self) -> bool:
        return self.cursor > 0

    def can_redo(self) -> bool:
        return self.cursor < len(self.commands)

    def append(self, command: Command) -> ActionLog:
        """Truncate the redoable tail, then add ``command`` as applied.

        The returned log has its cursor *before* the new command; callers
        follow with ``step_forward`` to apply it.
        """
        kept = self.commands[: self.cursor]
        return ActionLog(commands=kept + (command,), cursor=self.cursor)

    def step_back(self) -> Tuple[ActionLog, Optional[Command]]:
        """Move the cursor back one; returns the command being un-applied."""
        if not self.can_undo():
            return self, None
        cursor = self.cursor - 1
        return ActionLog(commands=self.commands, cursor=cursor), self.commands[cursor]

    def step_forward(self) -> Tuple[ActionLog, Optional[Command]]:
        """Move the cursor forward one; returns the command being applied."""
        if not self.can_redo():
            return self, None
        command = self.commands[self.cursor]
        return ActionLog(commands=self.commands, cursor=self.cursor + 1), command

    def current_id(self) -> str:
        """Id of the last applied command, or ``NO_COMMANDS`` at cursor 0."""
        if self.cursor == 0:
            return NO_COMMANDS
        return self.commands[self.cursor - 1].id
