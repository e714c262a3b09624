# src/unistate/cli.py
"""
unistate Command Line Interface (CLI).

This module is the terminal glue around the store, built with `typer` and
`rich`. It plays the two roles the store deliberately leaves to its callers:

- **Event dispatch**: turning user input (a JSON script, the demo steps) into
  `ActionDescriptor`s and dispatching them.
- **Rendering**: a subscriber that redraws the todo list after every commit.

Usage
-----
    # Walk through the reference scenarios
    $ unistate demo --diff

    # Dispatch a script of actions: [{"name": "ADD_TODO", "payload": "Buy milk"}, ...]
    $ unistate run actions.json --history
"""

from __future__ import annotations

import json
import traceback
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from unistate.core.store import (
    ActionDescriptor,
    Store,
    SubscriberFailure,
    log_subscriber_failure,
)
from unistate.todo import (
    ActionName,
    TodoIndex,
    TodoState,
    TodoStatus,
    create_store,
    parse_action,
    toggle_action_name,
)

# Ensure env vars (LOG_LEVEL, UNISTATE_*) are loaded before any store is built
load_dotenv()

app = typer.Typer(
    help="unistate: an immutable state-history store driving a todo list.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers: Rendering
# --------------------------------------------------------------------------- #


def _render_todos(state: TodoState) -> None:
    """Subscriber: draw the todo list as a Rich table."""
    table = Table(title="ToDos", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Text")
    table.add_column("Status")

    if not state.todos:
        table.add_row("-", "[dim]None Found[/dim]", "")
    for i, item in enumerate(state.todos):
        text = escape(item.text)
        if item.status is TodoStatus.COMPLETE:
            table.add_row(str(i), f"[strike]{text}[/strike]", "[green]Complete[/green]")
        else:
            table.add_row(str(i), text, "[yellow]InProgress[/yellow]")
    console.print(table)


def _report_failure(failure: SubscriberFailure) -> None:
    """Error reporter: show the failure on screen, then log it as usual."""
    console.print(
        f"[bold yellow]⚠️ Subscriber failed (rev {failure.revision}):[/bold yellow] "
        f"{escape(repr(failure.error))}"
    )
    log_subscriber_failure(failure)


def _format_payload(payload: Any) -> str:
    if isinstance(payload, TodoIndex):
        return f"index={payload.index}"
    return json.dumps(payload, default=str)


def _render_history(store: Store[TodoState], show_diff: bool) -> None:
    """Print the history log, oldest first, with an optional per-step diff."""
    table = Table(title="History")
    table.add_column("Rev", justify="right")
    table.add_column("Action", style="cyan")
    table.add_column("Payload")
    table.add_column("Todos", justify="right")
    if show_diff:
        table.add_column("Changes")

    entries = store.history()
    for pos in range(len(entries) - 1, -1, -1):
        entry = entries[pos]
        name = entry.action.name if entry.action else "(initial)"
        payload = _format_payload(entry.action.payload) if entry.action else ""
        row = [str(entry.revision), name, payload, str(len(entry.snapshot.extract().todos))]
        if show_diff:
            changes = store.diff(older=pos + 1, newer=pos) if pos + 1 < len(entries) else {}
            row.append(
                "\n".join(f"{path}: {old!r} → {new!r}" for path, (old, new) in changes.items())
            )
        table.add_row(*(escape(cell) for cell in row))
    console.print(table)


def _dispatch(store: Store[TodoState], action: ActionDescriptor, verbose: bool = False) -> bool:
    """Dispatch defensively; print the error and return False on failure."""
    console.print(f"[bold]→ {action.name}[/bold] {escape(_format_payload(action.payload))}")
    result = store.try_dispatch(action)
    if result.is_err():
        error = result.unwrap_err()
        console.print(f"[bold red]❌ Dispatch Error:[/bold red] {escape(str(error))}")
        if verbose:
            traceback.print_exception(error)
        return False
    return True


def _load_script(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array of `{name, payload}` objects."""
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of actions")
    return data


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def demo(
    diff: Annotated[
        bool,
        typer.Option("--diff", "-d", help="Show what each action changed in the history log."),
    ] = False,
) -> None:
    """
    Run the reference todo scenarios against a fresh store.

    Adds, completes and removes todos, dispatches an unknown action, then
    registers a failing subscriber to show that delivery continues past it.
    """
    console.print(Panel.fit("[bold cyan]unistate demo[/bold cyan]", border_style="cyan"))

    store = create_store(on_subscriber_error=_report_failure)
    store.subscribe(_render_todos)
    _render_todos(store.state)

    _dispatch(store, ActionDescriptor(ActionName.ADD_TODO, "Buy milk"))

    first = store.state.todos[0]
    _dispatch(store, ActionDescriptor(toggle_action_name(first), TodoIndex(index=0, item=first)))
    _dispatch(store, ActionDescriptor(ActionName.REMOVE_TODO, TodoIndex(index=0)))
    _dispatch(store, ActionDescriptor("NOT_A_REAL_ACTION", None))

    def broken_view(_: TodoState) -> None:
        raise RuntimeError("view crashed")

    received: list[TodoState] = []
    store.subscribe(broken_view)
    store.subscribe(received.append)
    _dispatch(store, ActionDescriptor(ActionName.ADD_TODO, "Walk the dog"))
    console.print(f"[dim]Subscriber after the broken one saw {len(received)} update(s).[/dim]")

    _render_history(store, diff)


@app.command()  # type: ignore[misc]
def run(
    script: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="JSON file holding an array of {name, payload} actions.",
        ),
    ],
    history: Annotated[
        bool,
        typer.Option("--history/--no-history", "-H", help="Print the history log at the end."),
    ] = False,
    diff: Annotated[
        bool,
        typer.Option("--diff", "-d", help="Include per-action changes in the history log."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
    ] = False,
) -> None:
    """
    Dispatch every action of SCRIPT to a fresh todo store, in order.

    Stops at the first action that fails and exits with code 1.
    """
    console.print(
        Panel.fit(
            f"[bold cyan]unistate run[/bold cyan]\nScript: [u]{script.name}[/u]",
            border_style="cyan",
        )
    )

    store = create_store(on_subscriber_error=_report_failure)
    failed = False
    try:
        for raw in _load_script(script):
            if not _dispatch(store, parse_action(raw), verbose):
                failed = True
                break
    except ValueError as e:
        # pydantic ValidationError and json.JSONDecodeError are both ValueErrors
        console.print(f"\n[bold red]❌ Script Error:[/bold red] {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e

    _render_todos(store.state)
    if history or diff:
        _render_history(store, diff)

    if failed:
        raise typer.Exit(code=1)
    console.print(f"\n[bold green]✅ Complete![/bold green] (revision {store.revision})")


if __name__ == "__main__":
    app()
