import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from config import settings
from errors import CatalogError, attempt
from library import Library
from utils.ui_helpers import (
    print_books,
    print_issues,
    print_members,
    print_stats_result,
    set_output_mode,
)
from utils.validators import TextValidator

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.WARNING),
    format="%(levelname)s: %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

APP_NAME = settings.app_name

console = Console()


@dataclass
class CatalogFiles:
    books: str = settings.books_file
    members: str = settings.members_file


def _report(error: CatalogError) -> None:
    console.print(f"[bold red]Error:[/] {escape(error.message)}")


def _warn_if_inconsistent(lib: Library) -> None:
    issues = lib.check_consistency()
    if issues:
        logger.warning(f"Loaded catalog has {len(issues)} consistency issue(s); run 'check' for details")


# --- Interactive menu handlers ---
# Each handler receives the store it works on; nothing here keeps state.

def _ask_text(question: str, label: str) -> Optional[str]:
    value = TextValidator.sanitize_text(Prompt.ask(question))
    problem = TextValidator.problem(value, label)
    if problem:
        console.print(f"[bold red]Error:[/] {problem}")
        return None
    return value


def add_book_action(lib: Library, files: CatalogFiles) -> None:
    title = _ask_text("Enter book title", "Title")
    if title is None:
        return
    author = _ask_text("Enter author name", "Author")
    if author is None:
        return
    book_id = lib.add_book(title, author)
    console.print(f"[green]Book added with ID: {book_id}[/]")


def add_member_action(lib: Library, files: CatalogFiles) -> None:
    name = _ask_text("Enter member name", "Name")
    if name is None:
        return
    member_id = lib.add_member(name)
    console.print(f"[green]Member added with ID: {member_id}[/]")


def borrow_action(lib: Library, files: CatalogFiles) -> None:
    member_id = IntPrompt.ask("Enter member ID")
    book_id = IntPrompt.ask("Enter book ID")
    outcome = attempt(lib.borrow_book, member_id, book_id)
    if outcome.ok:
        console.print("[green]Book borrowed successfully.[/]")
    else:
        _report(outcome.error)


def return_action(lib: Library, files: CatalogFiles) -> None:
    member_id = IntPrompt.ask("Enter member ID")
    book_id = IntPrompt.ask("Enter book ID")
    outcome = attempt(lib.return_book, member_id, book_id)
    if outcome.ok:
        console.print("[green]Book returned successfully.[/]")
    else:
        _report(outcome.error)


def list_books_action(lib: Library, files: CatalogFiles) -> None:
    print_books(lib.list_books())


def list_members_action(lib: Library, files: CatalogFiles) -> None:
    print_members(lib.list_members())


def save_action(lib: Library, files: CatalogFiles) -> None:
    lib.save(files.books, files.members)
    console.print(f"[green]Data saved to {escape(files.books)} and {escape(files.members)}.[/]")


def load_action(lib: Library, files: CatalogFiles) -> None:
    lib.load(files.books, files.members)
    _warn_if_inconsistent(lib)
    console.print("[green]Data loaded from files.[/]")


MENU_ITEMS = [
    (1, "Add Book", add_book_action),
    (2, "Add Member", add_member_action),
    (3, "Borrow Book", borrow_action),
    (4, "Return Book", return_action),
    (5, "List All Books", list_books_action),
    (6, "List All Members", list_members_action),
    (7, "Save Data", save_action),
    (8, "Load Data", load_action),
]
EXIT_CHOICE = 9


def render_menu() -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, _ in MENU_ITEMS:
        table.add_row(f"[reverse]{key}[/]", label)
    table.add_row(f"[reverse]{EXIT_CHOICE}[/]", "Exit")

    panel = Panel(
        table,
        title=f"{APP_NAME} v{settings.app_version}",
        border_style="cyan",
        box=box.HEAVY,
        padding=(1, 2),
    )
    console.print(panel)


def run_menu(lib: Optional[Library] = None, files: Optional[CatalogFiles] = None) -> None:
    """Numbered interactive menu over a single catalog."""
    if lib is None:
        lib = Library()
    if files is None:
        files = CatalogFiles()
    actions: Dict[int, Callable[[Library, CatalogFiles], None]] = {key: func for key, _, func in MENU_ITEMS}

    if settings.autoload:
        outcome = attempt(load_action, lib, files)
        if not outcome.ok:
            _report(outcome.error)

    while True:
        render_menu()
        choice = IntPrompt.ask("Enter your choice")

        if choice == EXIT_CHOICE:
            console.print("[green]Exiting... Goodbye![/]")
            break
        action = actions.get(choice)
        if action is None:
            console.print("[yellow]Invalid choice.[/]")
            continue
        try:
            action(lib, files)
        except CatalogError as exc:
            _report(exc)
        print()  # spacing between operations


# --- Typer CLI ---
app = typer.Typer(help="Library catalog CLI")


@app.callback()
def _global_options(
    ctx: typer.Context,
    books_file: str = typer.Option(settings.books_file, "--books-file", help="Books catalog file"),
    members_file: str = typer.Option(settings.members_file, "--members-file", help="Members catalog file"),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options for every command (catalog files, output mode)."""
    if output:
        set_output_mode(output)
    ctx.obj = CatalogFiles(books=books_file, members=members_file)


@contextmanager
def open_catalog(files: CatalogFiles, save: bool = False) -> Iterator[Library]:
    """Load the catalog for one command and write it back if asked to."""
    lib = Library()
    try:
        lib.load(files.books, files.members)
        _warn_if_inconsistent(lib)
        yield lib
        if save:
            lib.save(files.books, files.members)
    except CatalogError as exc:
        print(f"Error: {exc}")
        raise typer.Exit(code=1)


def _require_text(value: str, label: str) -> str:
    value = TextValidator.sanitize_text(value)
    problem = TextValidator.problem(value, label)
    if problem:
        print(f"Error: {problem}")
        raise typer.Exit(code=1)
    return value


@app.command("add-book")
def cli_add_book(ctx: typer.Context, title: str, author: str):
    """Add a book and print its id."""
    title = _require_text(title, "Title")
    author = _require_text(author, "Author")
    with open_catalog(ctx.obj, save=True) as lib:
        book_id = lib.add_book(title, author)
    print(f"Book added with ID: {book_id}")


@app.command("add-member")
def cli_add_member(ctx: typer.Context, name: str):
    """Add a member and print their id."""
    name = _require_text(name, "Name")
    with open_catalog(ctx.obj, save=True) as lib:
        member_id = lib.add_member(name)
    print(f"Member added with ID: {member_id}")


@app.command("borrow")
def cli_borrow(ctx: typer.Context, member_id: int, book_id: int):
    """Lend a book to a member."""
    with open_catalog(ctx.obj, save=True) as lib:
        lib.borrow_book(member_id, book_id)
    print("Book borrowed successfully.")


@app.command("return")
def cli_return(ctx: typer.Context, member_id: int, book_id: int):
    """Take a book back from the member holding it."""
    with open_catalog(ctx.obj, save=True) as lib:
        lib.return_book(member_id, book_id)
    print("Book returned successfully.")


@app.command("list-books")
def cli_list_books(ctx: typer.Context):
    """List every book."""
    with open_catalog(ctx.obj) as lib:
        books = lib.list_books()
    print_books(books)


@app.command("list-members")
def cli_list_members(ctx: typer.Context):
    """List every member with the ids of the books they hold."""
    with open_catalog(ctx.obj) as lib:
        members = lib.list_members()
    print_members(members)


@app.command("stats")
def cli_stats(ctx: typer.Context):
    """Show catalog statistics."""
    with open_catalog(ctx.obj) as lib:
        stats = lib.get_statistics()
    print_stats_result(stats)


@app.command("check")
def cli_check(ctx: typer.Context):
    """Report books and members whose borrow records disagree."""
    with open_catalog(ctx.obj) as lib:
        issues = lib.check_consistency()
    print_issues(issues)
    if issues:
        raise typer.Exit(code=1)


@app.command("menu")
def cli_menu(ctx: typer.Context):
    """Start the interactive menu on the selected files."""
    run_menu(files=ctx.obj)


def run() -> None:
    if len(sys.argv) > 1:
        app()
    else:
        run_menu()


if __name__ == "__main__":
    run()
