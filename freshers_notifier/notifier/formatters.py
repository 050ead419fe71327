"""Freshers Notifier — Telegram Message Formatters.

Builds the Telegram HTML messages: the posting announcement plus the
short texts used by the bot commands. Only &, < and > need escaping in
HTML parse mode.

Every posting field has a fallback because no field is guaranteed to
exist on a detail page.
"""

from __future__ import annotations

from freshers_notifier.models import Posting

# ── Separator line between sections ──────────────────────
_SEP = "━━━━━━━━━━━━━━━━━━"

NOT_SPECIFIED = "Not specified"

# (emoji, display label, field key, fallback)
_FIELD_LINES = [
    ("💼", "Job Role", "Job Role", NOT_SPECIFIED),
    ("📍", "Location", "Job Location", "Multiple Locations"),
    ("🎓", "Qualifications", "Qualifications", "Any Graduate"),
    ("📅", "Batch", "Batch", NOT_SPECIFIED),
    ("🧑‍💻", "Experience", "Experience", "Freshers"),
    ("💰", "Salary", "Salary", "Competitive"),
]


def _e(text: str) -> str:
    """Escape HTML special characters for Telegram HTML parse mode."""
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _bold(text: str) -> str:
    return f"<b>{_e(text)}</b>"


def render_posting(posting: Posting) -> str:
    """Format a posting as a Telegram HTML message.

    Deterministic: the same posting always renders to the same text.
    Empty field values count as missing and get the fallback.

    Args:
        posting: The posting to announce.

    Returns:
        HTML formatted message string.
    """
    details = posting.details
    company = details.get("Company") or details.get("Company Name") or NOT_SPECIFIED

    lines = [
        f"📢 {_bold(posting.title)}",
        "",
        _SEP,
        f"🏢 <b>Company:</b> {_e(company)}",
    ]
    for emoji, label, key, fallback in _FIELD_LINES:
        value = details.get(key) or fallback
        lines.append(f"{emoji} <b>{label}:</b> {_e(value)}")

    lines.append(_SEP)
    lines.append(f"🔗 <b>Apply Link:</b> {_e(details.get('Apply Link') or '')}")

    return "\n".join(lines)


def format_welcome(recent_limit: int) -> str:
    """Welcome text for /start."""
    return "\n".join([
        "<b>👋 Welcome to the Job Updates Bot!</b>",
        "",
        "You are now subscribed and will receive every new posting.",
        "",
        "<b>Commands:</b>",
        "/latest — the most recent posting",
        f"/last — the last {recent_limit} postings",
    ])


def format_working(count: int | None = None) -> str:
    """Acknowledgement sent before a slow on-demand scrape."""
    if count is None:
        return "🔄 Fetching the latest posting..."
    return f"🔄 Fetching the last {count} postings, this may take a while..."


def format_no_updates() -> str:
    return "No job updates found."
