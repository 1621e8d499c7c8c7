import subprocess
import sys
import webbrowser
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.markup import escape
from rich import box
import typer

from book import Book
from member import Member
from library import Library, seed_sample_data
from config import settings
from utils.ui_helpers import (
    books_table,
    members_table,
    print_list_result,
    print_members_result,
    print_stats_result,
    set_output_mode,
)
from utils.validators import IdValidator, TextValidator

APP_NAME = settings.app_name

console = Console()


def build_library() -> Library:
    """Create the Library a shell session works against."""
    lib = Library()
    if settings.seed_sample_data:
        seed_sample_data(lib)
    return lib


# --- Typer CLI application ---
app = typer.Typer(help="Lending library CLI", add_completion=False)

@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options; without a subcommand the interactive menu starts."""
    if output:
        set_output_mode(output)
    ctx.obj = build_library()
    if ctx.invoked_subcommand is None:
        run_menu(ctx.obj)

@app.command("books")
def cli_books(ctx: typer.Context):
    """List all books sorted by title."""
    print_list_result(ctx.obj.list_books())

@app.command("members")
def cli_members(ctx: typer.Context):
    """List all members sorted by name."""
    print_members_result(ctx.obj.list_members())

@app.command("search")
def cli_search(
    ctx: typer.Context,
    query: str = typer.Argument("", help="Search query"),
    author: bool = typer.Option(False, "--author", "-a", help="Match authors only"),
    title: bool = typer.Option(False, "--title", "-t", help="Match titles only"),
    limit: int = typer.Option(settings.default_search_limit, "--limit", "-l", min=1, help="Maximum results to show"),
):
    """Search the catalogue by title and/or author."""
    lib: Library = ctx.obj
    if title and not author:
        books = lib.search_by_title(query)
    elif author and not title:
        books = lib.search_by_author(query)
    else:
        books = lib.search_books(query)

    books = books[:limit]
    if not books:
        print("No books matched the query.")
        return
    print_list_result(books)

@app.command("stats")
def cli_stats(ctx: typer.Context):
    """Show library statistics."""
    print_stats_result(ctx.obj.get_statistics())

@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
):
    """Start the HTTP service with Uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    url = f"http://{host}:{port}/docs"
    print(f"Starting API on {url}")
    try:
        webbrowser.open(url)
    except webbrowser.Error:
        pass
    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
    ]
    try:
        subprocess.run(args)
    except FileNotFoundError:
        console.print("[bold red]Error:[/] could not start `uvicorn`. Make sure it is installed.")


# --- Interactive menu ---
def _ask_id(label: str) -> str:
    while True:
        value = IdValidator.normalize_id(Prompt.ask(label))
        if IdValidator.is_valid_id(value):
            return value
        console.print("[yellow]Enter a single word without spaces.[/]")

def _ask_text(label: str, validator=TextValidator.validate_required) -> str:
    while True:
        value = TextValidator.sanitize_text(Prompt.ask(label))
        if validator(value):
            return value
        console.print("[yellow]This field cannot be empty.[/]")

def _ask_count(label: str, minimum: int = 0) -> int:
    while True:
        value = IntPrompt.ask(label)
        if value >= minimum:
            return value
        console.print(f"[yellow]Enter a valid number (>= {minimum}).[/]")

def _print_books(books, empty: str) -> None:
    if not books:
        console.print(f"[yellow]{empty}[/]")
        return
    console.print(books_table(books))

def add_book_flow(lib: Library) -> None:
    book_id = _ask_id("Book ID")
    title = _ask_text("Title")
    author = _ask_text("Author")
    copies = _ask_count("Number of copies")
    if lib.add_book(Book(book_id, title, author, copies)):
        console.print(f"[green]Book added:[/] {escape(title)}")
    else:
        console.print(f"[yellow]Book ID {escape(book_id)} already exists[/]")

def list_books_flow(lib: Library) -> None:
    _print_books(lib.list_books(), "No books")

def search_books_flow(lib: Library) -> None:
    mode = Prompt.ask("Search by (1) Title (2) Author (3) Both", choices=["1", "2", "3"], default="3")
    query = Prompt.ask("Query", default="")
    if mode == "1":
        books = lib.search_by_title(query)
    elif mode == "2":
        books = lib.search_by_author(query)
    else:
        books = lib.search_books(query)
    _print_books(books, "No results")

def add_member_flow(lib: Library) -> None:
    member_id = _ask_id("Member ID")
    name = _ask_text("Name", validator=TextValidator.validate_name)
    if lib.add_member(Member(member_id, name)):
        console.print(f"[green]Member added:[/] {escape(name)}")
    else:
        console.print(f"[yellow]Member ID {escape(member_id)} already exists[/]")

def list_members_flow(lib: Library) -> None:
    members = lib.list_members()
    if not members:
        console.print("[yellow]No members[/]")
        return
    console.print(members_table(members))

def borrow_flow(lib: Library) -> None:
    member_id = _ask_id("Member ID")
    book_id = _ask_id("Book ID")
    status = lib.borrow(member_id, book_id)
    console.print(f"[{'green' if status.ok else 'yellow'}]{status}[/]")

def return_flow(lib: Library) -> None:
    member_id = _ask_id("Member ID")
    book_id = _ask_id("Book ID")
    status = lib.return_book(member_id, book_id)
    console.print(f"[{'green' if status.ok else 'yellow'}]{status}[/]")

def remove_book_flow(lib: Library) -> None:
    book_id = _ask_id("Book ID to remove")
    book = lib.find_book(book_id)
    if not book:
        console.print("[yellow]Not found[/]")
        return
    if not Confirm.ask(f"Remove {escape(book.title)}?", default=False):
        console.print("[blue]Cancelled[/]")
        return
    if lib.remove_book(book_id):
        console.print("[green]Removed[/]")
    else:
        console.print(f"[red]Cannot remove: {book.on_loan} copies are on loan[/]")

def remove_member_flow(lib: Library) -> None:
    member_id = _ask_id("Member ID to remove")
    member = lib.find_member(member_id)
    if not member:
        console.print("[yellow]Not found[/]")
        return
    if lib.remove_member(member_id):
        console.print("[green]Removed[/]")
    else:
        console.print(f"[red]Cannot remove: member still holds {', '.join(member.borrowed_books)}[/]")

def add_copies_flow(lib: Library) -> None:
    book_id = _ask_id("Book ID")
    count = _ask_count("Copies to add", minimum=1)
    book = lib.add_copies(book_id, count)
    if book:
        console.print(f"[green]Copies updated:[/] {escape(str(book))}")
    else:
        console.print("[yellow]Book not found[/]")

def remove_copies_flow(lib: Library) -> None:
    book_id = _ask_id("Book ID")
    count = _ask_count("Copies to remove", minimum=1)
    book = lib.remove_copies(book_id, count)
    if book:
        console.print(f"[green]Copies updated:[/] {escape(str(book))}")
    else:
        console.print("[yellow]Book not found[/]")

def stats_flow(lib: Library) -> None:
    statistics = lib.get_statistics()
    console.print(Panel.fit(
        f"[bold]Books:[/] {statistics['total_books']}\n"
        f"[bold]Unique authors:[/] {statistics['unique_authors']}\n"
        f"[bold]Copies:[/] {statistics['available_copies']}/{statistics['total_copies']} available\n"
        f"[bold]Active loans:[/] {statistics['active_loans']}\n"
        f"[bold]Members:[/] {statistics['total_members']}",
        title="📊 Statistics",
        border_style="blue"
    ))

MENU = [
    ("1", "Add book", add_book_flow),
    ("2", "List all books", list_books_flow),
    ("3", "Search books", search_books_flow),
    ("4", "Add member", add_member_flow),
    ("5", "List members", list_members_flow),
    ("6", "Borrow book", borrow_flow),
    ("7", "Return book", return_flow),
    ("8", "Remove book", remove_book_flow),
    ("9", "Remove member", remove_member_flow),
    ("10", "Add copies", add_copies_flow),
    ("11", "Remove copies", remove_copies_flow),
    ("12", "Statistics", stats_flow),
]

def run_menu(lib: Library) -> None:
    """Simple interactive menu over one Library instance."""
    actions = {key: action for key, _, action in MENU}

    def render_menu() -> None:
        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, _ in MENU:
            table.add_row(key, label)
        table.add_row("0", "Exit")
        console.print(Panel(table, title=APP_NAME, border_style="cyan", box=box.HEAVY, padding=(1, 2)))

    while True:
        render_menu()
        choice = Prompt.ask("Choose", choices=[*actions, "0"], show_choices=False).strip()
        if choice == "0":
            console.print("[green]Goodbye![/]")
            break
        actions[choice](lib)
        console.print()  # blank line between operations

if __name__ == "__main__":
    app()
