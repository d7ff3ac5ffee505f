"""Command-line interface: click commands plus the interactive shell loop.

Tasks are addressed by the 1-based position shown in the listing, not by
their (long, timestamp-based) ids. Every command saves through the store.
"""
from __future__ import annotations
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import click

from app import TodoApp
from config import Settings, configure_logging, get_settings
from html_view import render_page
from models import PRIORITY_ALIASES, Priority
from seed import seed_if_empty
from storage import Storage, StorageError
from store import TaskStore
from theme import Palette
from view import display

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home); 3J first for reliability.
def _clear_screen() -> None:
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _enter_alt_screen() -> None:
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    print("\033[?1049l", end="", flush=True)


def split_priority(tokens: List[str]) -> tuple[Optional[Priority], List[str]]:
    """Pull a leading '!h' / '!high' style priority marker off the tokens."""
    if tokens and tokens[0].startswith('!'):
        priority = PRIORITY_ALIASES.get(tokens[0][1:].lower())
        if priority is not None:
            return priority, tokens[1:]
    return None, tokens


def build_app(settings: Settings, seed: bool = True) -> TodoApp:
    store = TaskStore(Storage.at(settings.storage_path, settings.storage_key))
    store.load()
    if seed and settings.seed_on_first_run:
        seed_if_empty(store)
    return TodoApp(store)


class Shell:
    def __init__(self, app: TodoApp, palette: Optional[Palette] = None, alt_screen: bool = True):
        self.app = app
        self.palette = palette or Palette()
        self.alt_screen = alt_screen
        self.messages: List[str] = []
        app.on_notice(self.messages.append)

    def run(self) -> None:
        """Main REPL loop; the list is cleared and redrawn each cycle."""
        exit_message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                _clear_screen()
                display(self.app.view, self.palette)
                for message in self.messages:
                    print(message)
                self.messages.clear()
                line = input("\n: ").strip()
                if not line:
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    self._help()
                    input("\nPress Enter to return to the list...")
                    continue
                if lower in ('exit', 'quit'):
                    exit_message = "Goodbye."
                    break
                try:
                    self.handle_command(line)
                except StorageError as exc:
                    self.messages.append(f"Changes were not saved: {exc}")
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        finally:
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                print(exit_message)

    # -------------------- command dispatch --------------------
    def handle_command(self, line: str) -> None:
        tokens = line.split()
        if not tokens:
            return
        cmd = tokens[0].lower()
        if cmd == 'add':
            self._cmd_add(tokens)
        elif cmd in ('x', 'toggle'):
            self._cmd_toggle(tokens)
        elif cmd in ('rm', 'remove'):
            self._cmd_rm(tokens)
        elif cmd == 'clear':
            if not self.app.clear_completed():
                self.messages.append("No completed tasks to clear.")
        else:
            self.messages.append("Unknown command. Type 'help' for instructions.")

    def _position(self, tokens: List[str], usage: str) -> Optional[int]:
        if len(tokens) != 2:
            self.messages.append(f"Usage: {usage}")
            return None
        raw = tokens[1].rstrip('.')
        if not raw.isdigit():
            self.messages.append("Invalid number.")
            return None
        task_id = self.app.task_id_at(int(raw))
        if task_id is None:
            self.messages.append(f"No task #{raw}.")
        return task_id

    def _cmd_add(self, tokens: List[str]) -> None:
        if len(tokens) > 1:  # inline shorthand
            priority, words = split_priority(tokens[1:])
            text = ' '.join(words)
        else:
            text = input("Enter task text: ")
            priority = PRIORITY_ALIASES.get(input("Priority (h/m/l, Enter for medium): ").strip().lower())
        if self.app.create(text, priority) is None:
            self.messages.append("Task text required.")

    def _cmd_toggle(self, tokens: List[str]) -> None:
        task_id = self._position(tokens, "x <n>")
        if task_id is not None:
            self.app.toggle(task_id)

    def _cmd_rm(self, tokens: List[str]) -> None:
        task_id = self._position(tokens, "rm <n>")
        if task_id is not None:
            self.app.delete(task_id)

    def _help(self) -> None:
        print("Commands:")
        print("  add                 Add a task (prompts for text and priority)")
        print("  add [!h|!m|!l] <text...>")
        print("                      Shorthand add; optional priority marker first (e.g., add !h pay rent)")
        print("  x <n>               Toggle task n done/not done (alias: toggle)")
        print("  rm <n>              Remove task n (alias: remove)")
        print("  clear               Remove all completed tasks")
        print("  help                Show this help (press Enter to return)")
        print("  exit                Exit (changes are saved as you go)")


# -------------------- click commands --------------------
def _resolve(app: TodoApp, position: int) -> int:
    task_id = app.task_id_at(position)
    if task_id is None:
        raise click.BadParameter(f"no task #{position}", param_hint='POSITION')
    return task_id


@click.group(invoke_without_command=True)
@click.option('--storage', 'storage_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Storage file (default: TODO_STORAGE_PATH or data/storage.json).')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help='Logging level (default: TODO_LOG_LEVEL or WARNING).')
@click.option('--no-seed', is_flag=True, help='Do not add sample tasks to an empty list.')
@click.pass_context
def cli(ctx: click.Context, storage_path: Optional[Path], log_level: Optional[str], no_seed: bool) -> None:
    """Keep a prioritized to-do list in the terminal."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level)
    if storage_path is not None:
        settings = replace(settings, storage_path=storage_path)
    try:
        app = build_app(settings, seed=not no_seed)
    except StorageError as exc:
        raise click.ClickException(f"Changes were not saved: {exc}") from exc
    if ctx.invoked_subcommand not in (None, 'shell'):
        app.on_notice(click.echo)
    ctx.obj = app
    ctx.meta['settings'] = settings
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@cli.command()
@click.argument('text', nargs=-1)
@click.option('-p', '--priority', default=Priority.MEDIUM.value, show_default=True,
              help='high, medium or low (h/m/l); anything else counts as medium.')
@click.pass_obj
def add(app: TodoApp, text: tuple, priority: str) -> None:
    """Add a task."""
    try:
        created = app.create(' '.join(text), priority)
    except StorageError as exc:
        raise click.ClickException(f"Changes were not saved: {exc}") from exc
    if created is None:
        raise click.UsageError("Task text is required.")


@cli.command()
@click.argument('position', type=int)
@click.pass_obj
def toggle(app: TodoApp, position: int) -> None:
    """Mark the task at POSITION done (or not done again)."""
    try:
        task = app.toggle(_resolve(app, position))
    except StorageError as exc:
        raise click.ClickException(f"Changes were not saved: {exc}") from exc
    if task is not None:
        state = 'done' if task.completed else 'not done'
        click.echo(f'Marked "{task.text}" {state}')


@cli.command()
@click.argument('position', type=int)
@click.pass_obj
def rm(app: TodoApp, position: int) -> None:
    """Delete the task at POSITION."""
    try:
        app.delete(_resolve(app, position))
    except StorageError as exc:
        raise click.ClickException(f"Changes were not saved: {exc}") from exc


@cli.command()
@click.pass_obj
def clear(app: TodoApp) -> None:
    """Remove all completed tasks."""
    try:
        removed = app.clear_completed()
    except StorageError as exc:
        raise click.ClickException(f"Changes were not saved: {exc}") from exc
    if not removed:
        click.echo("No completed tasks to clear.")


@cli.command(name='list')
@click.pass_context
def list_tasks(ctx: click.Context) -> None:
    """Show the list."""
    settings: Settings = ctx.meta['settings']
    display(ctx.obj.view, Palette(settings.palette), hints=False)


@cli.command()
@click.argument('output', type=click.Path(dir_okay=False, writable=True, path_type=Path))
@click.pass_obj
def export(app: TodoApp, output: Path) -> None:
    """Write the list as a static HTML page to OUTPUT."""
    try:
        output.write_text(render_page(app.view), encoding='utf-8')
    except OSError as exc:
        raise click.ClickException(f"Could not write {output}: {exc}") from exc
    click.echo(f"Exported {app.view.total} tasks to {output}")


@cli.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Interactive shell (default when no command is given)."""
    settings: Settings = ctx.meta['settings']
    Shell(ctx.obj, Palette(settings.palette), settings.alt_screen).run()
