"""
Terminal interface for browsing search results and picking a package.
"""

from .selection import Action, Phase, SelectionState
from .keymap import action_for_key
from .renderer import format_record, layout_panels, panel_height, render_frame
from .terminal import TerminalSession
from .loop import run_selection

__all__ = [
    'Action',
    'Phase',
    'SelectionState',
    'action_for_key',
    'format_record',
    'layout_panels',
    'panel_height',
    'render_frame',
    'TerminalSession',
    'run_selection'
]
