"""
Input loop for the result browser.

A plain single-threaded loop: draw, wait a bounded time for a key, apply at
most one transition, repeat until the selection is finished. The loop is the
only code that mutates the SelectionState while the terminal is held.
"""

import logging
from typing import Optional

from unipkg.core.interfaces import PackageRecord
from unipkg.tui.keymap import action_for_key
from unipkg.tui.renderer import DEFAULT_MAX_PANEL_HEIGHT, render_frame
from unipkg.tui.selection import SelectionState
from unipkg.tui.terminal import TerminalSession


logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.2


def run_selection(
    state: SelectionState,
    session: Optional[TerminalSession] = None,
    max_panel_height: int = DEFAULT_MAX_PANEL_HEIGHT,
    poll_interval: float = DEFAULT_POLL_INTERVAL
) -> Optional[PackageRecord]:
    """
    Let the user browse ``state`` until they pick a package or quit.

    Args:
        state: Selection to drive.
        session: Terminal to draw on and read keys from. If None, a
            TerminalSession on stdin/stdout is used.
        max_panel_height: Upper bound on a single panel's height.
        poll_interval: Seconds to wait for a key before redrawing.

    Returns:
        The chosen record, or None if the user quit.

    Raises:
        TerminalError: If the terminal cannot be acquired, used or restored.
            The terminal has been released by the time this propagates.
    """
    session = session or TerminalSession()

    with session:
        while not state.finished:
            session.draw(render_frame(state, session.size, max_panel_height))

            key = session.poll_key(poll_interval)
            if key is None:
                continue

            action = action_for_key(key)
            if action is None:
                logger.debug(f"Ignoring unbound key {key!r}")
                continue
            state.apply(action)

    return state.chosen
