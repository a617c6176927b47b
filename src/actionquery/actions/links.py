"""Admin links to action listings."""

from html import escape
from urllib.parse import quote

from actionquery.config.config import settings

__all__ = ["get_hook_pending_schedule_link_html"]


def get_hook_pending_schedule_link_html(
    hook: str, link_text: str = "View pending scheduled tasks"
) -> str:
    """Anchor tag linking to the admin list of pending actions for ``hook``."""
    url = (
        f"{settings.admin_url}&status=pending&s={quote(hook, safe='')}"
        "&action=-1&paged=1&action2=-1"
    )
    return f"<a href='{url}'>{escape(link_text)}</a>"
