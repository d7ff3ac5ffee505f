"""HTML rendering of a ViewModel (static snapshot export).

Task text is escaped here and only here; the presenter hands over raw text.
"""
from __future__ import annotations
import html
from typing import List

from presenter import TaskItem, ViewModel
from view import format_summary

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<main class="todo-app">
<h1>{title}</h1>
{body}
</main>
</body>
</html>
"""


def render_item(item: TaskItem) -> str:
    classes = ['todo-item', f'priority-{item.priority.value}']
    if item.completed:
        classes.append('completed')
    checked = ' checked' if item.completed else ''
    return (
        f'<div class="{" ".join(classes)}" data-id="{item.id}">'
        f'<input type="checkbox" class="todo-checkbox" disabled{checked}>'
        f'<span class="priority-badge">{item.priority.value}</span>'
        f'<span class="todo-text">{html.escape(item.text)}</span>'
        '</div>'
    )


def render_list(view: ViewModel) -> str:
    if view.empty_state:
        return '<div class="empty-state">No tasks yet.</div>'
    parts: List[str] = ['<div class="todo-list">']
    parts.extend(render_item(item) for item in view.incomplete)
    if view.separator_count is not None:
        parts.append(
            '<div class="section-separator">'
            f'<span class="separator-text">Completed ({view.separator_count})</span>'
            '</div>'
        )
    parts.extend(render_item(item) for item in view.completed)
    parts.append('</div>')
    parts.append(f'<div class="stats"><span class="task-count">{html.escape(format_summary(view))}</span></div>')
    return '\n'.join(parts)


def render_page(view: ViewModel, title: str = 'To-Do List') -> str:
    return PAGE_TEMPLATE.format(title=html.escape(title), body=render_list(view))
