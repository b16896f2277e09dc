"""Morning notification content - no I/O dependencies."""

from dataclasses import dataclass

from .buckets import AttentionSummary


@dataclass
class Notification:
    title: str
    body: str
    badge: int

    def to_markdown(self) -> str:
        if not self.body:
            return f"**{self.title}**"
        return f"**{self.title}**\n\n{self.body}"


def build_notification(summary: AttentionSummary, max_items: int = 5) -> Notification:
    """
    Format an attention summary as a notification.

    Pure function - no I/O. Delivery is up to the caller.
    """
    count = summary.needs_attention_count
    if count == 0:
        return Notification(
            title="Good morning!",
            body="Nothing on your plate today. Enjoy!",
            badge=0,
        )

    title = f"Good morning! {count} item{'' if count == 1 else 's'} today"
    body = "\n".join(f"• {t}" for t in summary.top_item_titles[:max_items])
    return Notification(title=title, body=body, badge=count)
