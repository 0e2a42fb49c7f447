from typing import Iterable

from insyd_feed.shared.models import FeedFilter, Notification


def project(feed: Iterable[Notification], selector: FeedFilter | str = FeedFilter.ALL) -> list[Notification]:
    """Visible subset of `feed` for `selector`, in feed order. Never mutates the feed."""
    selector = FeedFilter(selector)
    if selector is FeedFilter.ALL:
        return list(feed)
    return [n for n in feed if n.category.value == selector.value]
