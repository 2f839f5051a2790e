# content_formatter.py

from datetime import datetime
from html import escape

from models.github_webhook import PushEvent

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                       "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_timestamp(moment: datetime) -> str:
    """
    Render a timestamp as an en-US medium date and short time, e.g. "Oct 18, 2026, 3:05 PM".

    Built by hand so the output does not depend on the process locale.
    """
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{MONTH_ABBREVIATIONS[moment.month - 1]} {moment.day}, {moment.year}, "
        f"{hour}:{moment.minute:02d} {meridiem}"
    )


def build_update_content(event: PushEvent, branch: str, timestamp: datetime) -> str:
    """
    Build the Confluence storage-format fragment describing one push.
    """
    pusher = event.pusher.name if event.pusher else ""

    content = f"<h3>Update from GitHub - {format_timestamp(timestamp)}</h3>"
    content += (
        f"<p><strong>Repository:</strong> "
        f"<a href=\"{escape(event.repository.html_url)}\">{escape(event.repository.full_name)}</a></p>"
    )
    content += f"<p><strong>Branch:</strong> {escape(branch)}</p>"
    content += f"<p><strong>Pushed by:</strong> {escape(pusher)}</p>"
    content += "<h4>Commits:</h4>"
    content += "<ul>"

    for commit in event.commits:
        content += "<li>"
        content += f"<code>{escape(commit.short_sha)}</code> - "
        content += f"<a href=\"{escape(commit.url)}\">{escape(commit.title)}</a>"
        content += f" <em>by {escape(commit.author.name)}</em>"
        content += "</li>"

    content += "</ul>"
    content += "<hr/>"

    return content
