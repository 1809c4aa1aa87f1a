"""CLI commands for editing a panel layout session.

Each command loads the session file, applies one engine command through a
PanelStore and writes the result back when the state changed.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

import typer
import yaml
from rich.table import Table
from rich.tree import Tree

from ..config.settings import EngineSettings, get_session_path, load_settings
from ..error_handling import handle_error
from ..exceptions import PanelTreeError, RecordFormatError
from ..geometry import compute_rects
from ..records import state_from_dict, state_to_dict
from ..state import build_initial_state
from ..store import PanelStore
from ..tree import collect_groups_in_order, format_path, get_at_path, is_group, parse_path
from ..types import DROP_POSITIONS, SPLIT_DIRECTIONS, DropZone, PanelSystemState, PanelTree, TabDefinition
from ..utils.output import console, print_json

logger = logging.getLogger(__name__)

app = typer.Typer(help="Edit a panel layout session")


# ---------------------------------------------------------------------------
# Session file helpers
# ---------------------------------------------------------------------------


def _session_path(ctx: typer.Context) -> Path:
    obj = ctx.obj or {}
    return get_session_path(obj.get("session"))


def _settings(ctx: typer.Context) -> EngineSettings:
    obj = ctx.obj or {}
    settings = obj.get("settings")
    if settings is None:
        try:
            settings = load_settings()
        except PanelTreeError as e:
            handle_error(e, "load settings")
    return settings


def load_session(path: Path) -> PanelSystemState:
    """Read a session file.

    Raises:
        FileNotFoundError: If there is no session at ``path``
        RecordFormatError: If the file is not valid YAML or not a state record
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise RecordFormatError(f"Invalid YAML in session file: {e}", path=str(path)) from e
    return state_from_dict(data)


def save_session(path: Path, state: PanelSystemState) -> None:
    """Write a state to a session file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.dump(state_to_dict(state), default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    logger.debug(f"Saved session to {path}")


def _load_or_exit(ctx: typer.Context) -> PanelSystemState:
    path = _session_path(ctx)
    if not path.exists():
        console.print(f"[red]Error: No session at {path}. Run 'paneltree init' first[/red]")
        raise typer.Exit(1) from None
    try:
        return load_session(path)
    except PanelTreeError as e:
        handle_error(e, "load session", {"session": str(path)}, show_details=True)


def _apply(
    ctx: typer.Context,
    operation: str,
    command: Callable[[PanelStore], PanelSystemState],
    before: Optional[PanelSystemState] = None,
) -> PanelSystemState:
    """Run one store command against the session and persist the result.

    Returns ``before`` itself when the command changed nothing.
    """
    if before is None:
        before = _load_or_exit(ctx)
    store = PanelStore(before, settings=_settings(ctx))
    try:
        after = command(store)
    except PanelTreeError as e:
        handle_error(e, operation, show_details=True)
    if after is not before:
        save_session(_session_path(ctx), after)
    return after


def _require_group(state: PanelSystemState, group_id: str) -> None:
    if group_id not in state.groups_by_id:
        console.print(f"[red]Error: Group '{group_id}' not found[/red]")
        raise typer.Exit(1) from None


def _require_tab(state: PanelSystemState, group_id: str, tab_id: str) -> None:
    _require_group(state, group_id)
    if tab_id not in state.groups_by_id[group_id].tabs:
        console.print(f"[red]Error: Tab '{tab_id}' is not in group '{group_id}'[/red]")
        raise typer.Exit(1) from None


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _group_label(state: PanelSystemState, group_id: str) -> str:
    group = state.groups_by_id[group_id]
    tabs = []
    for tab in state.tabs_of(group_id):
        title = tab.title or tab.id
        tabs.append(f"[bold]{title}[/bold]" if tab.id == group.active_tab_id else title)
    marker = " [yellow]*[/yellow]" if state.focused_group_id == group_id else ""
    listing = ", ".join(tabs) if tabs else "[dim](empty)[/dim]"
    return f"[cyan]{group_id}[/cyan]{marker}: {listing}"


def _add_node(branch: Tree, state: PanelSystemState, node: PanelTree, path: tuple) -> None:
    if is_group(node):
        branch.add(_group_label(state, node.group_id))
        return
    child = branch.add(f"{node.direction} {node.ratio:.2f} [dim]{format_path(path)}[/dim]")
    _add_node(child, state, node.first, path + ("first",))
    _add_node(child, state, node.second, path + ("second",))


def render_tree(state: PanelSystemState) -> Tree:
    """Build a rich Tree of the layout."""
    if is_group(state.tree):
        return Tree(_group_label(state, state.tree.group_id))
    root = Tree(f"{state.tree.direction} {state.tree.ratio:.2f} [dim]root[/dim]")
    _add_node(root, state, state.tree.first, ("first",))
    _add_node(root, state, state.tree.second, ("second",))
    return root


def render_groups(state: PanelSystemState) -> Table:
    """Build a table of groups in focus order."""
    table = Table(title="Groups")
    table.add_column("#", style="dim", width=4)
    table.add_column("Group", style="cyan")
    table.add_column("Tabs")
    table.add_column("Active", style="bold")
    table.add_column("Focus", width=5)

    for index, group_id in enumerate(collect_groups_in_order(state.tree), start=1):
        group = state.groups_by_id[group_id]
        table.add_row(
            str(index),
            group_id,
            ", ".join(group.tabs) or "-",
            group.active_tab_id or "-",
            "*" if state.focused_group_id == group_id else "",
        )
    return table


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def init(
    ctx: typer.Context,
    tabs: List[str] = typer.Argument(..., help="Tab ids for the first group"),
    group: str = typer.Option("g1", "--group", "-g", help="Id of the first group"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing session"),
) -> None:
    """Start a new session with one group holding TABS."""
    path = _session_path(ctx)
    if path.exists() and not force:
        console.print(f"[red]Error: Session already exists at {path} (use --force to replace it)[/red]")
        raise typer.Exit(1) from None
    try:
        state = build_initial_state([TabDefinition(tab_id, title=tab_id) for tab_id in tabs], group_id=group)
    except PanelTreeError as e:
        handle_error(e, "init", show_details=True)
    save_session(path, state)
    console.print(f"[green]✅ Created session with group {group}:[/green] {', '.join(tabs)}")
    console.print(f"   [dim]{path}[/dim]")


@app.command()
def show(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Print the session record as JSON"),
) -> None:
    """Show the layout tree and its groups."""
    state = _load_or_exit(ctx)
    if json_output:
        print_json(state_to_dict(state))
        return
    console.print(render_tree(state))
    console.print(render_groups(state))


@app.command()
def split(
    ctx: typer.Context,
    group: str = typer.Argument(..., help="Group to split"),
    direction: str = typer.Option(
        "vertical", "--direction", "-d",
        help="vertical (side by side) or horizontal (stacked)",
    ),
    before: bool = typer.Option(False, "--before", help="Place the new group before GROUP"),
    tab: Optional[List[str]] = typer.Option(None, "--tab", "-t", help="Tab to move into the new group"),
) -> None:
    """Split GROUP, optionally moving tabs into the new group."""
    if direction not in SPLIT_DIRECTIONS:
        console.print(f"[red]Error: Invalid direction '{direction}'. Use one of: {', '.join(SPLIT_DIRECTIONS)}[/red]")
        raise typer.Exit(1) from None
    current = _load_or_exit(ctx)
    _require_group(current, group)

    placement = "before" if before else "after"
    state = _apply(ctx, "split", lambda store: store.split_group(group, direction, placement, tab or ()), current)
    if state.tree is current.tree:
        console.print(f"[yellow]Split refused: a {direction} split of {group} would exceed the split limits[/yellow]")
        raise typer.Exit(1) from None
    console.print(f"[green]✅ Split {group} ({direction}); focused {state.focused_group_id}[/green]")


@app.command()
def close(
    ctx: typer.Context,
    group: str = typer.Argument(..., help="Group to close"),
) -> None:
    """Close GROUP and its tabs."""
    _require_group(_load_or_exit(ctx), group)
    state = _apply(ctx, "close", lambda store: store.close_group(group))
    console.print(f"[green]✅ Closed {group}[/green]")
    if state.focused_group_id:
        console.print(f"   [dim]Focus: {state.focused_group_id}[/dim]")


@app.command()
def move(
    ctx: typer.Context,
    tab: str = typer.Argument(..., help="Tab to move"),
    source: str = typer.Option(..., "--from", help="Group the tab is in"),
    target: str = typer.Option(..., "--to", help="Group to drop onto"),
    position: str = typer.Option(
        "after-tab", "--position", "-p",
        help=f"Drop position: {', '.join(DROP_POSITIONS)}",
    ),
    ref: Optional[str] = typer.Option(None, "--ref", help="Reference tab for before-tab/after-tab"),
) -> None:
    """Move TAB from one group to another, or into a new split."""
    try:
        zone = DropZone(target, position, ref)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None
    current = _load_or_exit(ctx)
    _require_tab(current, source, tab)
    _require_group(current, target)

    state = _apply(ctx, "move", lambda store: store.move_tab(tab, source, zone), current)
    if state is current:
        console.print("[yellow]Nothing to move[/yellow]")
        return
    console.print(f"[green]✅ Moved {tab} to {state.find_group_of_tab(tab)}[/green]")


@app.command()
def reorder(
    ctx: typer.Context,
    group: str = typer.Argument(..., help="Group holding the tab"),
    tab: str = typer.Argument(..., help="Tab to move"),
    index: int = typer.Argument(..., help="New 1-based position"),
) -> None:
    """Move TAB to position INDEX within GROUP."""
    _require_tab(_load_or_exit(ctx), group, tab)
    state = _apply(ctx, "reorder", lambda store: store.reorder_tab(group, tab, index - 1))
    console.print(f"[green]✅ {group}:[/green] {', '.join(state.groups_by_id[group].tabs)}")


@app.command()
def activate(
    ctx: typer.Context,
    group: str = typer.Argument(..., help="Group holding the tab"),
    tab: str = typer.Argument(..., help="Tab to activate"),
) -> None:
    """Make TAB the active tab of GROUP and focus GROUP."""
    _require_tab(_load_or_exit(ctx), group, tab)
    _apply(ctx, "activate", lambda store: store.activate_tab(group, tab))
    console.print(f"[green]✅ Activated {tab} in {group}[/green]")


@app.command()
def focus(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="1-based group index, 'next' or 'prev'"),
) -> None:
    """Move focus to another group."""
    if target == "next":
        state = _apply(ctx, "focus", lambda store: store.focus_next())
    elif target == "prev":
        state = _apply(ctx, "focus", lambda store: store.focus_prev())
    else:
        try:
            index = int(target)
        except ValueError:
            console.print(f"[red]Error: Expected a group index, 'next' or 'prev', got '{target}'[/red]")
            raise typer.Exit(1) from None
        state = _apply(ctx, "focus", lambda store: store.focus_index(index))
    console.print(f"[green]Focus: {state.focused_group_id}[/green]")


@app.command()
def ratio(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Split path such as 'root' or 'first.second'"),
    value: float = typer.Argument(..., help="Share of space for the first child"),
) -> None:
    """Set the ratio of the split at PATH."""
    try:
        split_path = parse_path(path)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None
    node = get_at_path(_load_or_exit(ctx).tree, split_path)
    if node is None or is_group(node):
        console.print(f"[red]Error: No split at '{path}'[/red]")
        raise typer.Exit(1) from None

    state = _apply(ctx, "ratio", lambda store: store.set_split_ratio(split_path, value))
    console.print(f"[green]✅ {format_path(split_path)}: {get_at_path(state.tree, split_path).ratio:.2f}[/green]")


@app.command()
def rects(ctx: typer.Context) -> None:
    """Show each group's rectangle, in percent of the workspace."""
    state = _load_or_exit(ctx)
    table = Table(title="Rectangles (%)")
    table.add_column("Group", style="cyan")
    for column in ("x", "y", "w", "h"):
        table.add_column(column, justify="right")
    for group_id, rect in compute_rects(state.tree).items():
        table.add_row(group_id, f"{rect.x:.1f}", f"{rect.y:.1f}", f"{rect.w:.1f}", f"{rect.h:.1f}")
    console.print(table)
