"""Render events as Telegram HTML messages."""

from html import escape

from webhook_notify.schemas.webhooks import GitHubEvent, PingEvent, PushEvent


def format_push(event: PushEvent) -> str:
    """Summarise a push: linked commit count, target branch, one line per commit.

    Example::

        🔨 <a href="...compare/a...b">2 new commits</a> <b>to</b> <code>org/repo:main</code>:

        <a href="...">1a2b3c4d</a>: Fix typo
    """
    count = len(event.commits)
    noun = "commit" if count == 1 else "commits"
    lines = [
        f'🔨 <a href="{escape(event.compare)}">{count} new {noun}</a> <b>to</b> '
        f"<code>{escape(event.repository.full_name)}:{escape(event.branch_name)}</code>:",
        "",
    ]
    lines.extend(
        f'<a href="{escape(commit.url)}">{escape(commit.short_id)}</a>: {escape(commit.title)}'
        for commit in event.commits
    )
    return "\n".join(lines)


def format_ping(event: PingEvent) -> str:
    return escape(event.zen)


def format_event(event: GitHubEvent) -> str:
    match event:
        case PushEvent():
            return format_push(event)
        case PingEvent():
            return format_ping(event)
    msg = f"No formatter for {type(event).__name__}"
    raise TypeError(msg)
