"""todoctx CLI: Typer + Rich terminal interface.

Commands: generate, refs, defs, roots, filter, enclosing, check.
Environment overrides are read here and nowhere else.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from todoctx import __version__
from todoctx.clipboard import copy_to_clipboard
from todoctx.config import build_config, config_from_env
from todoctx.context.definitions import find_definition_files
from todoctx.context.enclosing import extract_enclosing_context
from todoctx.context.references import ReferenceScanner
from todoctx.context.search_root import determine_search_root, get_search_roots
from todoctx.context.substring import filter_substring_markers
from todoctx.errors import SymbolNotFoundError, TodoCtxError
from todoctx.generator import PromptGenerator
from todoctx.git import GitRepository
from todoctx.schemas.config import DEFAULT_MANIFEST
from todoctx.validation import check_prompt_length, validate_marker_count

console = Console()
err_console = Console(stderr=True)

# ── App ──────────────────────────────────────────────────────────

app = typer.Typer(
    name="todoctx",
    help="Assemble a focused prompt around the one // TODO: - in your tree.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"todoctx {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """todoctx: context engine for TODO-driven prompts."""


# ── Helpers ──────────────────────────────────────────────────────


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _fail(out: Console, error: Exception) -> typer.Exit:
    out.print(f"[red]Error:[/red] {escape(str(error))}")
    return typer.Exit(code=1)


def _read_text(out: Console, path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise _fail(out, e) from None


# ── generate ─────────────────────────────────────────────────────


@app.command()
def generate(
    singular: bool = typer.Option(False, "--singular", help="Only include the TODO file."),
    force_global: bool = typer.Option(
        False, "--force-global", help="Scan the whole git root instead of the nearest package."
    ),
    include_references: bool = typer.Option(
        False, "--include-references", help="Include files referencing the enclosing type."
    ),
    diff_with: str = typer.Option(
        None, "--diff-with", help="Append each file's diff against this branch."
    ),
    exclude: list[str] = typer.Option(
        None, "--exclude", help="Drop files with this basename (repeatable)."
    ),
    targeted: bool = typer.Option(
        False, "--tgtd", "--targeted", help="Only extract types from the block around the TODO."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    stdout: bool = typer.Option(False, "--stdout", help="Print the prompt instead of copying it."),
    no_clipboard: bool = typer.Option(False, "--no-clipboard", help="Skip the clipboard copy."),
    instruction_file: str = typer.Option(
        None, "--instruction-file", help="Use this TODO file instead of searching."
    ),
    git_root: str = typer.Option(
        None, "--git-root", help="Repository root; discovered with git when omitted."
    ),
) -> None:
    """Generate the prompt for the current TODO and copy it to the clipboard."""
    _setup_logging(verbose)
    out = err_console if stdout else console

    try:
        root = git_root or config_from_env(os.environ).get("git_root")
        if not root:
            root = str(GitRepository(Path.cwd()).toplevel())

        config = build_config(
            {
                "git_root": root,
                "instruction_file": instruction_file,
                "singular": singular or None,
                "force_global": force_global or None,
                "include_references": include_references or None,
                "excludes": exclude or None,
                "diff_branch": diff_with,
                "targeted": targeted or None,
                "disable_clipboard": (no_clipboard or stdout) or None,
                "verbose": verbose or None,
            },
            os.environ,
            Path(root),
        )

        out.print(f"Git root: [bold]{escape(config.git_root)}[/bold]")
        prompt = PromptGenerator(config).generate()
    except TodoCtxError as e:
        raise _fail(out, e) from None

    out.print(f"Instruction: [cyan]{escape(prompt.instruction)}[/cyan]")
    out.print(f"Search root: {escape(prompt.search_root)}")

    files_table = Table(title="Files (final list)")
    files_table.add_column("File", style="bold")
    files_table.add_column("Directory", style="dim")
    for f in prompt.files:
        p = Path(f)
        files_table.add_row(escape(p.name), escape(str(p.parent)))
    out.print(files_table)

    warning = check_prompt_length(prompt.text, config.max_prompt_chars)
    if warning:
        out.print(f"[yellow]Warning:[/yellow] {escape(warning)}")

    if stdout:
        typer.echo(prompt.text)
        return

    try:
        copied = copy_to_clipboard(prompt.text, disabled=config.disable_clipboard)
    except TodoCtxError as e:
        raise _fail(out, e) from None

    destination = "copied to clipboard" if copied else "ready (clipboard disabled)"
    out.print(Panel(
        f"[bold green]Prompt {destination}[/bold green]\n"
        f"{len(prompt.files)} file(s), {prompt.length:,} characters, "
        f"{prompt.marker_count} marker lines",
        title="[bold]todoctx[/bold]",
        border_style="green",
    ))


# ── Component commands ───────────────────────────────────────────


@app.command()
def refs(
    symbol: str = typer.Argument(..., help="Symbol to look for."),
    root: Path = typer.Option(Path("."), "--root", help="Directory to scan."),
) -> None:
    """List files referencing SYMBOL and how each was decided."""
    try:
        candidates = ReferenceScanner().scan(symbol, root)
        if not len(candidates):
            raise SymbolNotFoundError(f"No files under {root} reference '{symbol}'")
    except TodoCtxError as e:
        raise _fail(console, e) from None

    table = Table(title=f"References to {escape(symbol)}")
    table.add_column("Path", style="bold")
    table.add_column("Outcome", justify="center")
    for path in candidates.paths:
        outcome = candidates.outcome_for(path)
        table.add_row(escape(os.path.relpath(path, root)), outcome.value if outcome else "")
    console.print(table)


@app.command()
def defs(
    types: list[str] = typer.Argument(..., help="Type names to find definitions of."),
    root: Path = typer.Option(Path("."), "--root", help="Directory to scan."),
    manifest: str = typer.Option(DEFAULT_MANIFEST, "--manifest", help="Project manifest file."),
) -> None:
    """List files that define any of TYPES."""
    try:
        found = find_definition_files(types, root, manifest)
    except TodoCtxError as e:
        raise _fail(console, e) from None
    if not found:
        console.print("[dim]No definitions found.[/dim]")
        return
    for path in found:
        console.print(escape(path))


@app.command()
def roots(
    base: Path = typer.Argument(..., help="Base directory, usually the git root."),
    file: Path = typer.Option(None, "--file", help="TODO file to resolve a root for."),
    manifest: str = typer.Option(DEFAULT_MANIFEST, "--manifest", help="Project manifest file."),
) -> None:
    """Show candidate search roots under BASE and, with --file, the chosen one."""
    try:
        candidates = get_search_roots(base, manifest)
        chosen = determine_search_root(base, file, manifest) if file else None
    except TodoCtxError as e:
        raise _fail(console, e) from None

    for c in candidates:
        console.print(escape(str(c)))
    if chosen is not None:
        console.print(f"Search root: [bold]{escape(str(chosen))}[/bold]")


@app.command("filter")
def filter_cmd(
    file: Path = typer.Argument(..., help="File containing // v and // ^ markers."),
) -> None:
    """Print only the marked regions of FILE."""
    typer.echo(filter_substring_markers(_read_text(console, file)), nl=False)


@app.command()
def enclosing(
    file: Path = typer.Argument(..., help="Source file."),
    token: str = typer.Argument(..., help="Substring to locate."),
) -> None:
    """Print the innermost { } block around the first TOKEN in FILE."""
    block = extract_enclosing_context(_read_text(console, file), token)
    if block is None:
        console.print(f"[red]No enclosing block found for[/red] {escape(token)}")
        raise typer.Exit(code=1)
    typer.echo(block)


@app.command()
def check(
    file: Path = typer.Argument(..., help="Prompt file to check."),
    diff: bool = typer.Option(False, "--diff", help="Validate with diff mode rules."),
    max_chars: int = typer.Option(100_000, "--max-chars", help="Size warning threshold."),
) -> None:
    """Validate marker lines and size of an assembled prompt."""
    text = _read_text(console, file)
    try:
        count = validate_marker_count(text, diff)
    except TodoCtxError as e:
        raise _fail(console, e) from None

    console.print(f"[green]OK[/green] {count} marker lines, {len(text):,} characters")
    warning = check_prompt_length(text, max_chars)
    if warning:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")
