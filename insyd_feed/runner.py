"""
CLI entrypoint for the Insyd activity feed client.
"""
import asyncio
import sys

import typer
from loguru import logger
from rich.console import Console

from insyd_feed.client.dashboard import Dashboard, feed_table
from insyd_feed.client.session import FeedSession
from insyd_feed.shared.config import ClientConfig, settings
from insyd_feed.shared.errors import DeleteError, FetchError
from insyd_feed.shared.models import Category, FeedFilter

app = typer.Typer(help="Insyd activity feed client")
console = Console()


def client_config(api_url: str | None) -> ClientConfig:
    config = ClientConfig.from_settings(settings)
    if api_url:
        config = config.model_copy(update={"base_url": api_url.rstrip("/")})
    return config


@app.callback()
def main(log_level: str = typer.Option(settings.LOG_LEVEL, help="Log level for stderr output")):
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper())


@app.command()
def server():
    """Start the development backend using Uvicorn."""
    import uvicorn
    typer.echo(f"Starting dev backend on port {settings.PORT}...")
    uvicorn.run("insyd_feed.server.main:app", host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


@app.command()
def feed(
    filter: FeedFilter = typer.Option(FeedFilter.ALL, "--filter", help="Show only one category"),
    api_url: str = typer.Option(None, help="Backend base URL (defaults to API_URL)"),
):
    """Fetch the feed once and print it."""
    async def _feed() -> int:
        session = FeedSession(client_config(api_url))
        try:
            await session.poller.refresh()
        except FetchError as e:
            console.print(f"[red]Could not load notifications: {e}[/]")
            return 1
        finally:
            await session.close()
        session.filter = filter
        console.print(feed_table(session.visible(), title=f"Activity Feed ({len(session.store)})"))
        return 0

    raise typer.Exit(asyncio.run(_feed()))


@app.command()
def watch(
    filter: FeedFilter = typer.Option(FeedFilter.ALL, "--filter", help="Show only one category"),
    duration: float = typer.Option(60.0, help="How long to keep watching, in seconds"),
    api_url: str = typer.Option(None, help="Backend base URL (defaults to API_URL)"),
):
    """Poll the feed and render the live dashboard."""
    async def _watch():
        async with FeedSession(client_config(api_url)) as session:
            session.filter = filter
            await Dashboard(session).run(duration)

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        pass


@app.command()
def delete(
    notification_id: str = typer.Argument(..., help="ID of the notification to delete"),
    api_url: str = typer.Option(None, help="Backend base URL (defaults to API_URL)"),
):
    """Delete one notification (confirmed by the server)."""
    async def _delete() -> int:
        session = FeedSession(client_config(api_url))
        try:
            await session.deletions.delete_notification(notification_id)
        except DeleteError as e:
            console.print(f"[red]Notification {notification_id} was not deleted: {e}[/]")
            return 1
        finally:
            await session.close()
        console.print(f"[green]Deleted {notification_id}[/]")
        return 0

    raise typer.Exit(asyncio.run(_delete()))


@app.command()
def send(
    type: Category = typer.Option(Category.LIKE, "--type", help="Event type"),
    target: str = typer.Option(None, help="Target user ID (defaults to USER_ID)"),
    content: str = typer.Option("", help="Event message"),
    api_url: str = typer.Option(None, help="Backend base URL (defaults to API_URL)"),
):
    """Create a new activity event."""
    if type is Category.UNRECOGNIZED:
        raise typer.BadParameter("pick one of: like, comment, follow, post, message", param_hint="--type")

    async def _send() -> int:
        session = FeedSession(client_config(api_url))
        try:
            form = session.new_form()
            form.category = type
            form.content = content
            if target:
                form.target_user_id = target
            result = await session.submitter.submit(form)
        finally:
            await session.close()
        color = "green" if form.status_is_success else "red"
        console.print(f"[{color}]{form.status}[/]")
        return 0 if result and result.ok else 1

    raise typer.Exit(asyncio.run(_send()))


if __name__ == "__main__":
    app()
