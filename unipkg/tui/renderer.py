"""
Rendering of the result browser.

Everything here is a pure function of a SelectionState and the terminal size:
the state is only read. ``layout_panels`` does the geometry and produces plain
PanelView values; ``render_frame`` turns them into rich renderables.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from unipkg.core.interfaces import PackageRecord, ResultGroup
from unipkg.tui.keymap import HELP_TEXT
from unipkg.tui.selection import SelectionState

DEFAULT_MAX_PANEL_HEIGHT = 12
EMPTY_PANEL_HEIGHT = 3
NO_MATCHES_TEXT = " No packages matched "
HIGHLIGHT_SYMBOL = "› "
ACCENT = "green"
FOOTER_HEIGHT = 1


@dataclass(frozen=True)
class PanelView:
    """
    Geometry and content of one group's panel for a single frame.
    """
    group_index: int
    title: str
    height: int
    lines: Tuple[str, ...]
    highlighted: Optional[int]
    active: bool

    @property
    def empty(self) -> bool:
        return not self.lines


def format_record(record: PackageRecord) -> str:
    """Format a record as ``name [version] — description``."""
    text = record.display_name
    if record.version:
        text += f" [{record.version}]"
    if record.description:
        text += f" — {record.description}"
    return text


def panel_height(group: ResultGroup, max_panel_height: int = DEFAULT_MAX_PANEL_HEIGHT) -> int:
    """Height of a group's panel including its border."""
    if group.is_empty:
        return EMPTY_PANEL_HEIGHT
    return min(max_panel_height, len(group) + 2)


def visible_window(cursor: Optional[int], total: int, rows: int) -> Tuple[int, int]:
    """
    Range of record indices shown in a panel with ``rows`` inner rows.

    The window starts at the top and scrolls just enough to keep the cursor
    on the last visible row.
    """
    if rows <= 0:
        return 0, 0
    start = 0
    if cursor is not None and cursor >= rows:
        start = cursor - rows + 1
    return start, min(total, start + rows)


def _first_visible_group(heights: List[int], active: int, available: int) -> int:
    """First panel to draw so that the active panel fits when possible."""
    start = 0
    while start < active and sum(heights[start:active + 1]) > available:
        start += 1
    return start


def layout_panels(
    state: SelectionState,
    height: int,
    max_panel_height: int = DEFAULT_MAX_PANEL_HEIGHT
) -> List[PanelView]:
    """
    Compute the panels that fit in a terminal of the given height.

    Args:
        state: Selection to draw. Not modified.
        height: Rows available for panels.
        max_panel_height: Upper bound on a single panel's height.

    Returns:
        Non-overlapping panels in group order, possibly starting after the
        first group when the active one would otherwise be off screen.
    """
    heights = [panel_height(group, max_panel_height) for group in state.groups]
    start = _first_visible_group(heights, state.active_group, height)

    views = []
    remaining = height
    for index in range(start, len(state.groups)):
        if remaining < EMPTY_PANEL_HEIGHT:
            break
        group = state.groups[index]
        panel_rows = min(heights[index], remaining)
        remaining -= panel_rows

        cursor = state.cursor_for(index)
        first, last = visible_window(cursor, len(group), panel_rows - 2)
        lines = tuple(format_record(record) for record in group.records[first:last])
        highlighted = cursor - first if cursor is not None and first <= cursor < last else None

        views.append(PanelView(
            group_index=index,
            title=group.source_name,
            height=panel_rows,
            lines=lines,
            highlighted=highlighted,
            active=index == state.active_group
        ))
    return views


def _panel_body(view: PanelView) -> RenderableType:
    if view.empty:
        return Text(NO_MATCHES_TEXT, no_wrap=True, overflow="ellipsis")

    rows = []
    for row, line in enumerate(view.lines):
        if row == view.highlighted:
            rows.append(Text(HIGHLIGHT_SYMBOL + line, style=f"bold {ACCENT}", no_wrap=True, overflow="ellipsis"))
        else:
            rows.append(Text(" " * len(HIGHLIGHT_SYMBOL) + line, no_wrap=True, overflow="ellipsis"))
    return Group(*rows)


def render_panel(view: PanelView) -> Panel:
    """Render one panel; the active one gets a bold border, others are dimmed."""
    border_style = f"bold {ACCENT}" if view.active else f"dim {ACCENT}"
    return Panel(
        _panel_body(view),
        title=Text(view.title, style=border_style),
        title_align="left",
        border_style=border_style,
        height=view.height,
    )


def render_frame(
    state: SelectionState,
    size: Tuple[int, int],
    max_panel_height: int = DEFAULT_MAX_PANEL_HEIGHT
) -> RenderableType:
    """
    Render a full frame: one panel per visible group and a help footer.

    Args:
        state: Selection to draw. Not modified.
        size: Terminal (width, height).
        max_panel_height: Upper bound on a single panel's height.
    """
    _, height = size
    views = layout_panels(state, max(0, height - FOOTER_HEIGHT), max_panel_height)
    footer = Text(HELP_TEXT, style="dim", no_wrap=True, overflow="ellipsis")
    return Group(*(render_panel(view) for view in views), footer)
