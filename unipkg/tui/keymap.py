"""
Key bindings for the result browser.
"""

from typing import Dict, Optional

import readchar

from unipkg.tui.selection import Action

# readchar has no name for shift-tab; terminals send CSI Z.
BACK_TAB = "\x1b[Z"

KEY_BINDINGS: Dict[str, Action] = {
    "j": Action.MOVE_DOWN,
    readchar.key.DOWN: Action.MOVE_DOWN,
    "k": Action.MOVE_UP,
    readchar.key.UP: Action.MOVE_UP,
    "g": Action.JUMP_TOP,
    "G": Action.JUMP_BOTTOM,
    "h": Action.PREV_GROUP,
    readchar.key.LEFT: Action.PREV_GROUP,
    BACK_TAB: Action.PREV_GROUP,
    "l": Action.NEXT_GROUP,
    readchar.key.RIGHT: Action.NEXT_GROUP,
    readchar.key.TAB: Action.NEXT_GROUP,
    readchar.key.ENTER: Action.CONFIRM,
    "\r": Action.CONFIRM,
    "\n": Action.CONFIRM,
    "q": Action.QUIT,
}

HELP_TEXT = "j/k ↓/↑ move · g/G top/bottom · h/l ←/→ Tab switch source · Enter install · q quit"


def action_for_key(key: str) -> Optional[Action]:
    """Map a key read by readchar to an action, or None if it is unbound."""
    return KEY_BINDINGS.get(key)
