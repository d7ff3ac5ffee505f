"""Terminal rendering of a ViewModel.

The list is printed in the order the presenter chose; rows are numbered by
display position, which is what shell commands refer to. Text is wrapped to
the terminal width with continuation lines indented under the text.
"""
from __future__ import annotations
import re
import shutil
from typing import List, Optional

from presenter import TaskItem, ViewModel
from theme import BOLD, DIM, STRIKE, Palette, color

TITLE = "TO-DO"
MIN_WIDTH = 24
PRIORITY_BADGES = {'high': '[H]', 'medium': '[M]', 'low': '[L]'}
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
EMPTY_MESSAGE = "No tasks yet. Add one with: add <text>"


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


def format_summary(view: ViewModel) -> str:
    noun = 'task' if view.total == 1 else 'tasks'
    line = f"{view.total} {noun} ({view.completed_count} done, {view.pending_count} left)"
    if view.high_priority_pending_count:
        line += f", {view.high_priority_pending_count} high priority"
    return line


def format_separator(count: int, width: int) -> str:
    label = f" Completed ({count}) "
    side = max(2, (width - len(label)) // 2)
    return '-' * side + label + '-' * side


def _wrap_words(text: str, limit: int) -> List[str]:
    lines: List[str] = []
    current = ''
    for w in text.split():
        candidate = w if not current else current + ' ' + w
        if len(candidate) <= limit:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = w
    if current:
        lines.append(current)
    return lines or ['']


def format_item(item: TaskItem, width: int, palette: Palette) -> List[str]:
    box = '[x]' if item.completed else '[ ]'
    badge = PRIORITY_BADGES[item.priority.value]
    prefix_visible = f"{item.position:>2}. {box} {badge} "
    prefix = (color(f"{item.position:>2}.", palette.position) + ' ' + box + ' '
              + color(badge, palette.priority[item.priority], BOLD) + ' ')
    text_style = (palette.done, DIM, STRIKE) if item.completed else ()
    indent = ' ' * len(prefix_visible)
    raw_lines = _wrap_words(item.text, max(1, width - len(prefix_visible)))
    out = [prefix + color(raw_lines[0], *text_style)]
    out.extend(indent + color(line, *text_style) for line in raw_lines[1:])
    return out


def format_lines(view: ViewModel, width: int = 80, palette: Optional[Palette] = None,
                 hints: bool = True) -> List[str]:
    palette = palette or Palette()
    width = max(MIN_WIDTH, width)
    lines = [color(TITLE, palette.header), color('=' * width, palette.primary)]
    if view.empty_state:
        lines.append(color(EMPTY_MESSAGE, palette.muted))
        return lines
    for item in view.incomplete:
        lines.extend(format_item(item, width, palette))
    if view.separator_count is not None:
        lines.append(color(format_separator(view.separator_count, width), palette.muted))
    for item in view.completed:
        lines.extend(format_item(item, width, palette))
    lines.append(color('-' * width, palette.primary))
    lines.append(format_summary(view))
    if hints and view.show_clear_completed:
        lines.append(color("Type 'clear' to remove completed tasks.", palette.muted))
    return lines


def display(view: ViewModel, palette: Optional[Palette] = None, hints: bool = True) -> None:
    term_width = shutil.get_terminal_size((80, 30)).columns
    for line in format_lines(view, term_width, palette, hints):
        print(line)
