"""
MODULE OVERVIEW:
The Rich terminal dashboard for a running FeedSession.

WHAT IS HAPPENING HERE:
Pure presentation. The session keeps polling in the background and this class just
re-renders whatever the store, the projection and the in-flight deletion set say,
four times a second. No decisions are made here.
"""
import asyncio

from rich.console import Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from insyd_feed.client.event_submitter import EventForm
from insyd_feed.client.session import FeedSession
from insyd_feed.shared.models import Notification

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def feed_table(notifications: list[Notification], deleting: set[str] | None = None, title: str = "Activity Feed") -> Table:
    deleting = deleting or set()
    table = Table(title=title, expand=True)
    table.add_column("Time", justify="left", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("Content", style="green")
    table.add_column("ID", style="dim", no_wrap=True)

    for n in notifications:
        row_style = "dim strike" if n.id in deleting else None
        table.add_row(n.local_time.strftime(TIME_FORMAT), n.category.label, n.content, n.id, style=row_style)
    return table


class Dashboard:
    def __init__(self, session: FeedSession, form: EventForm | None = None):
        self.session = session
        self.form = form

    def generate_layout(self) -> Layout:
        store = self.session.store
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="main"),
            Layout(name="status", size=3),
        )

        synced = store.last_synced_at.astimezone().strftime("%H:%M:%S") if store.last_synced_at else "never"
        layout["header"].update(Panel(
            f"[bold]Activity Feed[/] | {len(store)} notifications | "
            f"filter: {self.session.filter.value} | last sync: {synced}",
            style="blue",
        ))

        if store.loading:
            body = Panel("Loading notifications...", title="Feed")
        else:
            visible = self.session.visible()
            if visible:
                body = Panel(feed_table(visible, self.session.deletions.in_flight), title="Feed")
            else:
                body = Panel(
                    Group("[bold]No notifications found[/]", "When you receive notifications, they will appear here."),
                    title="Feed",
                )
        layout["main"].update(body)

        status = self.form.status if self.form and self.form.status else ""
        color = "green" if self.form and self.form.status_is_success else "red"
        layout["status"].update(Panel(f"[{color}]{status}[/]", title="Status"))
        return layout

    async def run(self, duration_s: float) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration_s
        with Live(self.generate_layout(), refresh_per_second=4) as live:
            while loop.time() < deadline:
                live.update(self.generate_layout())
                await asyncio.sleep(0.25)
