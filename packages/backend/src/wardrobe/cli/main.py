"""Wardrobe CLI — run the API server and manage the database.

Usage:
    wardrobe serve                     # uvicorn on WARDROBE_HOST:WARDROBE_PORT
    wardrobe serve --reload            # auto-reload while developing
    wardrobe init-db                   # create tables without Alembic
    wardrobe check-config              # show the effective settings (no secrets)
"""

from __future__ import annotations

import asyncio

import click

from wardrobe import __version__
from wardrobe.config import settings


@click.group()
@click.version_option(__version__, prog_name="wardrobe")
def cli():
    """Wardrobe API management commands."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: WARDROBE_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: WARDROBE_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "wardrobe.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db():
    """Create all tables directly from the models.

    Prefer ``alembic upgrade head`` for real deployments.
    """
    from wardrobe.db.engine import create_tables, engine

    async def _init():
        await create_tables()
        await engine.dispose()

    asyncio.run(_init())
    click.secho("Tables created.", fg="green")


@cli.command("check-config")
def check_config():
    """Print the effective configuration, secrets redacted."""
    rows = [
        ("environment", settings.environment),
        ("database_url", settings.database_url.split("@")[-1]),
        ("frontend_url", settings.frontend_url),
        ("cookie_secure", settings.cookie_secure),
        ("access_token_ttl", f"{settings.access_token_expire_minutes}m"),
        ("refresh_token_ttl", f"{settings.refresh_token_expire_days}d"),
        ("cloudinary", "configured" if settings.cloudinary_configured else "missing"),
    ]
    width = max(len(k) for k, _ in rows)
    for key, value in rows:
        click.echo(f"{key.ljust(width)}  {value}")


if __name__ == "__main__":
    cli()
