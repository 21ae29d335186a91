import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()

def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"

def print_books(books: List[Any]) -> None:
    """Print books in the current output mode.
    - plain: 'ID: .. | Title: .. | Author: .. | Borrowed: Yes/No' lines
    - json: array of book objects
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print("No books in the library.")
        return

    if mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Borrowed", style="white")
        for b in books:
            table.add_row(str(b.id), escape(b.title), escape(b.author), _yes_no(b.borrowed))
        _console.print(table)
    else:
        print("Books:")
        for b in books:
            print(str(b))

def print_members(members: List[Any]) -> None:
    """Print members in the current output mode."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([m.to_dict() for m in members], ensure_ascii=False))
        return

    if not members:
        print("No members.")
        return

    if mode == "rich":
        table = Table(title="👥 Members", show_lines=True, header_style="bold cyan")
        table.add_column("Member ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Borrowed Book IDs", style="white")
        for m in members:
            table.add_row(str(m.member_id), escape(m.name), " ".join(str(i) for i in m.borrowed_book_ids))
        _console.print(table)
    else:
        print("Members:")
        for m in members:
            print(str(m))

def print_stats_result(stats: Dict[str, Any]) -> None:
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Total Books:[/] {stats['total_books']}\n"
            f"[bold]Borrowed Books:[/] {stats['borrowed_books']}\n"
            f"[bold]Available Books:[/] {stats['available_books']}\n"
            f"[bold]Members:[/] {stats['total_members']}\n"
            f"[bold]Members Holding Books:[/] {stats['active_members']}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Total Books: {stats['total_books']}")
        print(f"Borrowed Books: {stats['borrowed_books']}")
        print(f"Available Books: {stats['available_books']}")
        print(f"Members: {stats['total_members']}")
        print(f"Members Holding Books: {stats['active_members']}")

def print_issues(issues: List[Any]) -> None:
    mode = get_output_mode()

    if mode == "json":
        payload = [{"book_id": i.book_id, "member_id": i.member_id, "message": i.message} for i in issues]
        print(json.dumps(payload, ensure_ascii=False))
    elif not issues:
        print("Catalog is consistent.")
    elif mode == "rich":
        body = "\n".join(f"• {escape(i.message)}" for i in issues)
        _console.print(Panel.fit(body, title="⚠️ Consistency issues", border_style="yellow"))
    else:
        for i in issues:
            print(i.message)
