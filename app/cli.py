"""Typer-based CLI for creating, seeding and inspecting the blog database."""

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db.init_db import drop_db, init_db
from app.db.inspection import list_indexes
from app.db.session import build_engine
from app.repositories.base import UnitOfWork
from app.services.query_report import compare_loading_strategies, run_index_probes
from app.services.seed_service import seed_blog

console = Console()

app = typer.Typer(
    name="blogdb",
    help="Blog database toolkit - schema, fixture data, index plans and load-strategy comparison.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    database_url: Annotated[
        Optional[str],
        typer.Option(
            "--database-url",
            "-d",
            help="SQLAlchemy database URL",
            envvar="DATABASE_URL",
        ),
    ] = None,
) -> None:
    """Blog database toolkit.

    Global options are processed before any command.
    """
    engine = build_engine(database_url or settings.database_url)
    ctx.obj = {
        "engine": engine,
        "session_factory": sessionmaker(autocommit=False, autoflush=False, bind=engine),
    }


@app.command(name="init-db")
def init_db_cmd(
    ctx: typer.Context,
    drop: Annotated[bool, typer.Option("--drop", help="Drop existing tables first")] = False,
) -> None:
    """Create the users, posts and comments tables with their indexes."""
    engine = ctx.obj["engine"]
    if drop:
        drop_db(engine)
    init_db(engine)
    console.print("[green]Schema created.[/green]")


@app.command(name="seed")
def seed_cmd(
    ctx: typer.Context,
    users: Annotated[int, typer.Option("--users", min=1, help="Number of users")] = 100,
    posts_per_user: Annotated[int, typer.Option("--posts-per-user", min=0, help="Posts per user")] = 10,
    comments_per_post: Annotated[int, typer.Option("--comments-per-post", min=0, help="Comments per post")] = 5,
    realistic: Annotated[bool, typer.Option("--realistic", help="Generate text with Faker")] = False,
) -> None:
    """Insert fixture data.

    Examples:
        blogdb seed
        blogdb seed --users 3 --posts-per-user 5 --comments-per-post 2
    """
    with UnitOfWork(ctx.obj["session_factory"]) as uow:
        result = seed_blog(
            uow,
            users=users,
            posts_per_user=posts_per_user,
            comments_per_post=comments_per_post,
            realistic=realistic,
        )
        uow.commit()

    console.print(
        f"[green]Seeded[/green] {result.users} users, {result.posts} posts, {result.comments} comments"
    )


@app.command(name="indexes")
def indexes_cmd(ctx: typer.Context) -> None:
    """List the indexes of every blog table."""
    table = Table(title="Indexes")
    table.add_column("Table")
    table.add_column("Index")
    table.add_column("Columns")
    table.add_column("Unique")

    for table_name in ("users", "posts", "comments"):
        for ix in list_indexes(ctx.obj["engine"], table_name):
            table.add_row(table_name, ix.name, ", ".join(ix.columns), "yes" if ix.unique else "")

    console.print(table)


@app.command(name="explain")
def explain_cmd(ctx: typer.Context) -> None:
    """Print query plans for the lookups each index is meant to serve."""
    table = Table(title="Query plans")
    table.add_column("Query")
    table.add_column("Plan")
    table.add_column("Expected index")
    table.add_column("Result")

    with ctx.obj["session_factory"]() as session:
        results = run_index_probes(session)

    for r in results:
        if r.full_scan:
            verdict = "[red]full scan[/red]"
        elif r.used_index:
            verdict = "[green]index[/green]"
        else:
            verdict = "[yellow]other[/yellow]"
        table.add_row(r.probe.description, "\n".join(r.plan), r.probe.expected_index or "-", verdict)

    console.print(table)


@app.command(name="compare")
def compare_cmd(ctx: typer.Context) -> None:
    """Count the statements each load strategy needs for the post listing."""
    results = compare_loading_strategies(ctx.obj["session_factory"], ctx.obj["engine"])

    table = Table(title="Load strategies")
    table.add_column("Strategy")
    table.add_column("Posts", justify="right")
    table.add_column("Statements", justify="right")
    table.add_column("Time (ms)", justify="right")
    for r in results:
        table.add_row(r.name, str(r.posts), str(r.statements), f"{r.elapsed_ms:.1f}")

    console.print(table)


if __name__ == "__main__":
    app()
