"""
Selection state for browsing grouped search results.

SelectionState is a small state machine with two phases. While BROWSING it
accepts navigation actions; once FINISHED (a package was chosen or the user
quit) every action is ignored. It performs no I/O.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

from unipkg.core.interfaces import PackageRecord, ResultGroup


logger = logging.getLogger(__name__)


class Phase(Enum):
    """
    Phase of a selection.
    """
    BROWSING = "browsing"
    FINISHED = "finished"


class Action(Enum):
    """
    Transitions accepted while browsing.
    """
    MOVE_DOWN = "move_down"
    MOVE_UP = "move_up"
    JUMP_TOP = "jump_top"
    JUMP_BOTTOM = "jump_bottom"
    NEXT_GROUP = "next_group"
    PREV_GROUP = "prev_group"
    CONFIRM = "confirm"
    QUIT = "quit"


class SelectionState:
    """
    Cursor and selection bookkeeping over a fixed list of result groups.

    Each group keeps its own cursor, so switching groups and back returns to
    the same record. Empty groups have no cursor but can still be made active.
    """

    def __init__(self, groups: Sequence[ResultGroup]):
        """
        Initialize the selection state.

        Args:
            groups: Result groups in display order. Must not be empty.

        Raises:
            ValueError: If no groups are given.
        """
        if not groups:
            raise ValueError("SelectionState needs at least one result group")

        self.groups: List[ResultGroup] = list(groups)
        self.cursors: Dict[int, Optional[int]] = {
            index: (None if group.is_empty else 0)
            for index, group in enumerate(self.groups)
        }
        self.active_group = 0
        self.phase = Phase.BROWSING
        self.chosen: Optional[PackageRecord] = None

    @property
    def finished(self) -> bool:
        return self.phase is Phase.FINISHED

    @property
    def cursor(self) -> Optional[int]:
        """Cursor of the active group."""
        return self.cursors[self.active_group]

    def cursor_for(self, group_index: int) -> Optional[int]:
        return self.cursors[group_index]

    def current_record(self) -> Optional[PackageRecord]:
        """Record under the active group's cursor, if any."""
        cursor = self.cursor
        records = self.groups[self.active_group].records
        if cursor is None or not 0 <= cursor < len(records):
            return None
        return records[cursor]

    def apply(self, action: Action) -> None:
        """
        Apply one transition.

        Does nothing once the selection is finished.
        """
        if self.finished:
            return

        handler = {
            Action.MOVE_DOWN: self.move_down,
            Action.MOVE_UP: self.move_up,
            Action.JUMP_TOP: self.jump_top,
            Action.JUMP_BOTTOM: self.jump_bottom,
            Action.NEXT_GROUP: self.next_group,
            Action.PREV_GROUP: self.prev_group,
            Action.CONFIRM: self.confirm,
            Action.QUIT: self.quit,
        }[action]
        handler()

    def move_down(self) -> None:
        if self.finished:
            return
        cursor = self.cursor
        if cursor is not None and cursor + 1 < len(self.groups[self.active_group]):
            self.cursors[self.active_group] = cursor + 1

    def move_up(self) -> None:
        if self.finished:
            return
        cursor = self.cursor
        if cursor is not None and cursor > 0:
            self.cursors[self.active_group] = cursor - 1

    def jump_top(self) -> None:
        if self.finished:
            return
        if not self.groups[self.active_group].is_empty:
            self.cursors[self.active_group] = 0

    def jump_bottom(self) -> None:
        if self.finished:
            return
        group = self.groups[self.active_group]
        if not group.is_empty:
            self.cursors[self.active_group] = len(group) - 1

    def next_group(self) -> None:
        if self.finished:
            return
        self.active_group = (self.active_group + 1) % len(self.groups)

    def prev_group(self) -> None:
        if self.finished:
            return
        self.active_group = (self.active_group - 1 + len(self.groups)) % len(self.groups)

    def confirm(self) -> None:
        """Finish with the record under the cursor; no-op without one."""
        if self.finished:
            return
        record = self.current_record()
        if record is None:
            return
        self.chosen = record
        self.phase = Phase.FINISHED
        logger.debug(f"Selected {record.install_id} from {record.source}")

    def quit(self) -> None:
        """Finish without a selection."""
        if self.finished:
            return
        self.chosen = None
        self.phase = Phase.FINISHED
