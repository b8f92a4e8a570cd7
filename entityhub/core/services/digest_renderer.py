"""
Digest Renderer.

Builds one reminder email per recipient: subject, HTML body and a
plain-text alternative. Each row shows the task title, the entity it
belongs to, the due date and a relative urgency label.
"""

from datetime import date, datetime
from html import escape

from entityhub.core.entities.directory import Recipient
from entityhub.core.entities.reminder import DigestMessage, ReminderItem
from entityhub.core.entities.task import TaskPriority
from entityhub.core.services.filing_status import days_until, humanize_due, urgency_level

PRIORITY_BADGES: dict[TaskPriority, str] = {
    TaskPriority.URGENT: "🔴",
    TaskPriority.HIGH: "🟠",
    TaskPriority.MEDIUM: "🟡",
    TaskPriority.LOW: "🟢",
}

URGENCY_COLORS: dict[str, str] = {
    "critical": "#dc2626",
    "warning": "#f59e0b",
    "normal": "#0d9488",
}


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


class DigestRenderer:
    """Render reminder digests."""

    def __init__(self, portal_url: str = "", product_name: str = "Entity Hub"):
        self.portal_url = portal_url
        self.product_name = product_name

    def subject(self, items: list[ReminderItem]) -> str:
        return f"📋 {_plural(len(items), 'upcoming task')} due soon"

    def render(
        self,
        recipient: Recipient,
        items: list[ReminderItem],
        now: date | datetime,
        horizon_days: int,
    ) -> DigestMessage:
        """Render a digest for one recipient."""
        return DigestMessage(
            recipient_id=recipient.id,
            to_email=recipient.email or "",
            to_name=recipient.display_name,
            subject=self.subject(items),
            html_body=self._render_html(recipient, items, now, horizon_days),
            text_body=self._render_text(recipient, items, now, horizon_days),
            task_ids=[item.task_id for item in items],
        )

    def _render_text(
        self,
        recipient: Recipient,
        items: list[ReminderItem],
        now: date | datetime,
        horizon_days: int,
    ) -> str:
        lines = [
            f"Hi {recipient.display_name},",
            "",
            f"You have {_plural(len(items), 'task')} due in the next {horizon_days} days:",
            "",
        ]
        for item in items:
            task = item.task
            line = f"- [{task.priority.value}] {task.title}"
            if item.entity_name:
                line += f" ({item.entity_name})"
            line += f" - due {task.due_date.isoformat()} ({humanize_due(task.due_date, now)})"
            lines.append(line)
        if self.portal_url:
            lines += ["", f"View all tasks: {self.portal_url}"]
        lines += ["", f"This is an automated reminder from {self.product_name}."]
        return "\n".join(lines)

    def _render_row(self, item: ReminderItem, now: date | datetime) -> str:
        task = item.task
        days = days_until(task.due_date, now)
        color = URGENCY_COLORS[urgency_level(days)]
        badge = PRIORITY_BADGES.get(task.priority, "")
        entity = (
            f'<br><span style="font-size: 12px; color: #666;">{escape(item.entity_name)}</span>'
            if item.entity_name
            else ""
        )
        return (
            "<tr>"
            f'<td style="padding: 12px; border-bottom: 1px solid #e5e7eb;">'
            f"{badge} {escape(task.title)}{entity}</td>"
            f'<td style="padding: 12px; border-bottom: 1px solid #e5e7eb; text-align: center;">'
            f'<span style="color: {color}; font-weight: 600;">{task.due_date.strftime("%b %d, %Y")}</span>'
            f'<br><span style="font-size: 11px; color: #888;">{humanize_due(task.due_date, now)}</span>'
            "</td>"
            "</tr>"
        )

    def _render_html(
        self,
        recipient: Recipient,
        items: list[ReminderItem],
        now: date | datetime,
        horizon_days: int,
    ) -> str:
        rows = "".join(self._render_row(item, now) for item in items)
        button = (
            f'<div style="text-align: center; margin: 30px 0;">'
            f'<a href="{escape(self.portal_url)}" style="background: #0d9488; color: white; '
            f'padding: 14px 32px; text-decoration: none; border-radius: 8px;">View All Tasks</a>'
            f"</div>"
            if self.portal_url
            else ""
        )
        return (
            "<!DOCTYPE html><html><head><meta charset=\"utf-8\"></head>"
            '<body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto;">'
            '<h1 style="font-size: 24px;">📋 Upcoming Tasks Reminder</h1>'
            f"<p>Hi <strong>{escape(recipient.display_name)}</strong>,</p>"
            f"<p>You have <strong>{_plural(len(items), 'task')}</strong> "
            f"due in the next {horizon_days} days:</p>"
            '<table style="width: 100%; border-collapse: collapse;">'
            "<thead><tr><th style=\"text-align: left;\">Task</th>"
            "<th style=\"text-align: center;\">Due Date</th></tr></thead>"
            f"<tbody>{rows}</tbody></table>"
            f"{button}"
            f'<p style="font-size: 12px; color: #999;">This is an automated reminder from '
            f"{escape(self.product_name)}.</p>"
            "</body></html>"
        )
