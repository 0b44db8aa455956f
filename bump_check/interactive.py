"""Interactive decision session.

The session is a small state machine driven by key presses. Every key press
mutates the decision map or the focused row, after which the row list is
derived again from scratch: deciding to release a workspace may surface new
dependents, and those appear right away.

States:
    BROWSING  - the only non-terminal state
    CONFIRMED - the user pressed Enter; the decision map is the result
    ABORTED   - the user left any other way; there is no result
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path

import click
from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.padding import Padding
from rich.text import Text

from .graph import dedupe_dependents, fetch_undecided_dependents
from .models import Decision, Row, Status, Workspace
from .versions import next_version, strategies_for

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
CONFIRM = "confirm"
ABORT = "abort"

# Raw sequences as returned by click.getchar(), POSIX and Windows flavours
KEY_BINDINGS: dict[str, str] = {
    "\x1b[A": UP,
    "\x1b[B": DOWN,
    "\x1b[C": RIGHT,
    "\x1b[D": LEFT,
    "\x1bOA": UP,
    "\x1bOB": DOWN,
    "\x1bOC": RIGHT,
    "\x1bOD": LEFT,
    "\xe0H": UP,
    "\xe0P": DOWN,
    "\xe0M": RIGHT,
    "\xe0K": LEFT,
    "\x00H": UP,
    "\x00P": DOWN,
    "\x00M": RIGHT,
    "\x00K": LEFT,
    "\r": CONFIRM,
    "\n": CONFIRM,
    "\x1b": ABORT,
    "q": ABORT,
}


class SessionState(str, Enum):
    BROWSING = "browsing"
    CONFIRMED = "confirmed"
    ABORTED = "aborted"


def translate_key(ch: str) -> str | None:
    """Map a raw key sequence to a session event, or None if it's unbound."""
    return KEY_BINDINGS.get(ch)


class DecisionSession:
    """Holds the decisions a user makes while browsing the workspaces.

    Args:
        status: Classification of the changed workspaces.
        workspaces: The full workspace graph, in declaration order.
        files: Changed files, shown as context above the rows.
        root: Repository root.
    """

    def __init__(
        self,
        status: Status,
        workspaces: Mapping[str, Workspace],
        files: list[Path],
        root: Path,
    ) -> None:
        self.status = status
        self.workspaces = workspaces
        self.files = files
        self.root = root
        self.decisions: dict[str, Decision] = {}
        self.state = SessionState.BROWSING

        rows = self.rows()
        self.active_key: str | None = rows[0].key if rows else None

    def decision_for(self, name: str) -> Decision:
        return self.decisions.get(name, Decision.UNDECIDED)

    def set_decision(self, name: str, decision: Decision) -> None:
        """Record a decision. Undecided is stored as the absence of an entry."""
        if decision is Decision.UNDECIDED:
            self.decisions.pop(name, None)
        else:
            self.decisions[name] = decision

    def undecided_dependents(self) -> list[Workspace]:
        """Dependents of the decided workspaces, taking the session's decisions
        into account."""
        decided = list(self.status.decided)
        declined = list(self.status.declined)
        for name, decision in self.decisions.items():
            if decision is Decision.DECLINE:
                declined.append(self.workspaces[name])
            else:
                decided.append(self.workspaces[name])

        pairs = fetch_undecided_dependents(
            decided, declined, self.workspaces, exclude=set(self.decisions)
        )
        return dedupe_dependents(pairs)

    def rows(self) -> list[Row]:
        """Derive the displayed rows from the current decisions."""
        rows = [
            Row(key=f"undecided-workspace:{ws.name}", workspace=ws)
            for ws in self.status.undecided
        ]
        rows.extend(
            Row(key=f"undecided-dependent:{ws.name}", workspace=ws, dependent=True)
            for ws in self.undecided_dependents()
        )
        return rows

    def active_row(self, rows: list[Row]) -> Row | None:
        return next((row for row in rows if row.key == self.active_key), None)

    def handle_key(self, key: str) -> None:
        """Apply one event. Terminal states ignore further events."""
        if self.state is not SessionState.BROWSING:
            return

        if key == CONFIRM:
            self.state = SessionState.CONFIRMED
        elif key == ABORT:
            self.state = SessionState.ABORTED
        elif key in (UP, DOWN):
            self._move_focus(-1 if key == UP else 1)
        elif key in (LEFT, RIGHT):
            self._cycle_decision(-1 if key == LEFT else 1)

    def _move_focus(self, offset: int) -> None:
        keys = [row.key for row in self.rows()]
        if not keys:
            return
        if self.active_key not in keys:
            # The focused row went away after a decision changed
            self.active_key = keys[0]
            return
        index = keys.index(self.active_key)
        self.active_key = keys[(index + offset) % len(keys)]

    def _cycle_decision(self, offset: int) -> None:
        row = self.active_row(self.rows())
        if row is None or row.workspace.version is None:
            return
        strategies = strategies_for(row.workspace.version)
        current = self.decision_for(row.workspace.name)
        index = strategies.index(current) if current in strategies else 0
        self.set_decision(row.workspace.name, strategies[(index + offset) % len(strategies)])

    def result(self) -> dict[str, Decision] | None:
        if self.state is SessionState.CONFIRMED:
            return dict(self.decisions)
        return None

    def render(self) -> RenderableType:
        """Build the screen for the current state."""
        rows = self.rows()
        undecided = [row for row in rows if not row.dependent]
        dependents = [row for row in rows if row.dependent]

        parts: list[RenderableType] = [
            Text("The following files have been modified in your local checkout.")
        ]
        listing = Text()
        for f in self.files:
            listing.append(f"{self.root}/", style="grey50")
            listing.append(f"{f.relative_to(self.root).as_posix()}\n")
        parts.append(Padding(listing, (1, 0, 0, 2)))

        if undecided:
            parts.append(
                Text(
                    "Because of those files having been modified, the following "
                    "workspaces may need to be released again (private workspaces "
                    "are shown too: bumping them flags their dependents for a "
                    "potential release):"
                )
            )
            parts.extend(self._render_row(row) for row in undecided)

        if dependents:
            parts.append(
                Text(
                    "The following workspaces depend on other workspaces that have "
                    "been bumped, and thus may need to receive a bump of their own:"
                )
            )
            parts.extend(self._render_row(row) for row in dependents)

        parts.append(
            Text(
                "↑/↓ select, ←/→ change strategy, Enter confirm, q abort", style="dim"
            )
        )
        return Group(*parts)

    def _render_row(self, row: Row) -> RenderableType:
        ws = row.workspace
        version = ws.version or ""
        decision = self.decision_for(ws.name)

        line = Text()
        line.append("▶ " if row.key == self.active_key else "  ", style="cyan")
        line.append(ws.name, style="bold")
        line.append(" - ")
        if decision is Decision.UNDECIDED:
            line.append(version, style="yellow")
        elif decision is Decision.DECLINE:
            line.append(version, style="green")
        else:
            line.append(version, style="magenta")
            line.append(" → ")
            line.append(next_version(version, decision), style="green")

        line.append("\n  ")
        for strategy in strategies_for(version):
            if strategy is decision:
                line.append("  ◼ ", style="green")
            else:
                line.append("  ◻ ", style="yellow")
            line.append(strategy.value)

        return Padding(line, (1, 0, 0, 2))


def run_session(
    session: DecisionSession,
    read_key: Callable[[], str] = click.getchar,
    console: Console | None = None,
) -> dict[str, Decision] | None:
    """Drive `session` from key presses until it reaches a terminal state.

    Returns:
        The confirmed decision map, or None if the session was aborted.
    """
    console = console or Console()
    with Live(session.render(), console=console, auto_refresh=False) as live:
        while session.state is SessionState.BROWSING:
            try:
                ch = read_key()
            except (KeyboardInterrupt, EOFError):
                session.handle_key(ABORT)
                break
            key = translate_key(ch)
            if key is None:
                continue
            session.handle_key(key)
            live.update(session.render(), refresh=True)
    return session.result()
