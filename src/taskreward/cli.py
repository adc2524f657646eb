"""Command-line interface for the task reward service."""

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from taskreward.errors import RewardServiceError
from taskreward.logging_config import configure_logging, get_logger
from taskreward.referral.service import ReferralService
from taskreward.storage.db import db
from taskreward.storage.repo import CompletionRepository, TaskRepository, UserRepository
from taskreward.tasks.catalog import TaskCatalog
from taskreward.tasks.settlement import SettlementService
from taskreward.users.service import UserService

logger = get_logger(__name__)

# Create Typer app
app = typer.Typer(
    name="taskreward",
    help="Task Reward - task completion rewards with referral bonuses",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    configure_logging()


def _fail(exc: RewardServiceError) -> None:
    console.print(f"[bold red]✗[/bold red] {exc.message} ({exc.kind})")
    raise typer.Exit(code=1)


@app.command("init")
def init_database() -> None:
    """Initialize the database and create tables."""
    console.print("[bold blue]Initializing database...[/bold blue]")
    db.create_tables()
    console.print("[bold green]✓[/bold green] Database initialized successfully")


@app.command("task-create")
def create_task(
    title: Annotated[str, typer.Option("--title", "-t", help="Task title")],
    price: Annotated[int, typer.Option("--price", "-p", help="Reward paid on completion")],
    description: Annotated[str, typer.Option("--description", "-d", help="Task description")] = "",
) -> None:
    """Create a new task."""
    catalog = TaskCatalog(db, TaskRepository())
    try:
        task_id = catalog.create_task(title, description, price)
    except RewardServiceError as exc:
        _fail(exc)
    console.print(f"[bold green]✓[/bold green] Task created with ID: [bold]{task_id}[/bold]")


@app.command("task-list")
def list_tasks() -> None:
    """List all tasks."""
    tasks = TaskCatalog(db, TaskRepository()).list_tasks()

    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    table = Table(title="Tasks")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Description")
    table.add_column("Price", justify="right")

    for task in tasks:
        table.add_row(str(task.id), task.title, task.description, str(task.price))

    console.print(table)


@app.command("complete")
def complete_task(
    user_id: Annotated[int, typer.Option("--user", "-u", help="User ID")],
    task_id: Annotated[int, typer.Option("--task", "-t", help="Task ID")],
) -> None:
    """Complete a task on behalf of a user."""
    users = UserRepository()
    settlement = SettlementService(
        db,
        users=users,
        tasks=TaskRepository(),
        completions=CompletionRepository(),
        referrals=ReferralService(db, users),
    )
    try:
        result = settlement.complete_task(user_id, task_id)
    except RewardServiceError as exc:
        _fail(exc)

    console.print(f"[bold green]✓[/bold green] User {user_id} earned [bold]{result.reward}[/bold]")
    if result.referral_bonus:
        console.print(f"  Referrer {result.referrer_id} earned {result.referral_bonus}")


@app.command("leaderboard")
def leaderboard(
    limit: Annotated[int, typer.Option("--limit", "-l", help="Number of users")] = 10,
) -> None:
    """Show users ranked by balance."""
    users = UserService(db, UserRepository(), CompletionRepository()).leaderboard(limit)

    table = Table(title="Leaderboard")
    table.add_column("#", style="cyan")
    table.add_column("User", style="green")
    table.add_column("Balance", justify="right")

    for rank, user in enumerate(users, start=1):
        table.add_row(str(rank), user.username, str(user.balance))

    console.print(table)


if __name__ == "__main__":
    app()
