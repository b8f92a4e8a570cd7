"""Tests for DigestRenderer."""

from datetime import date, timedelta

from entityhub.core.entities.directory import Recipient
from entityhub.core.entities.reminder import ReminderItem
from entityhub.core.entities.task import FilingTask, TaskPriority
from entityhub.core.services.digest_renderer import DigestRenderer

TODAY = date(2025, 3, 20)


def _make_item(task_id: int, days: int, title: str = "File annual report", **kwargs) -> ReminderItem:
    return ReminderItem(
        task=FilingTask(
            id=task_id,
            entity_id=1,
            title=title,
            due_date=TODAY + timedelta(days=days),
            priority=kwargs.pop("priority", TaskPriority.HIGH),
        ),
        entity_name=kwargs.pop("entity_name", "Acme Holdings LLC"),
    )


class TestDigestRenderer:
    def setup_method(self):
        self.renderer = DigestRenderer(portal_url="https://hub.example.com/tasks", product_name="Entity Hub")
        self.recipient = Recipient(id="u1", name="Ada", email="ada@example.com")

    def test_subject_pluralizes(self):
        assert self.renderer.subject([_make_item(1, 1)]) == "📋 1 upcoming task due soon"
        assert self.renderer.subject([_make_item(1, 1), _make_item(2, 2)]) == "📋 2 upcoming tasks due soon"

    def test_message_envelope(self):
        message = self.renderer.render(self.recipient, [_make_item(1, 1), _make_item(2, 5)], TODAY, 7)

        assert message.recipient_id == "u1"
        assert message.to_email == "ada@example.com"
        assert message.to_name == "Ada"
        assert message.task_ids == [1, 2]

    def test_text_body_rows(self):
        message = self.renderer.render(self.recipient, [_make_item(1, 0), _make_item(2, 5)], TODAY, 7)

        assert "Hi Ada," in message.text_body
        assert "2 tasks due in the next 7 days" in message.text_body
        assert "- [high] File annual report (Acme Holdings LLC) - due 2025-03-20 (Today)" in message.text_body
        assert "(5 days)" in message.text_body
        assert "https://hub.example.com/tasks" in message.text_body

    def test_html_body_rows(self):
        message = self.renderer.render(
            self.recipient,
            [_make_item(1, 1, priority=TaskPriority.URGENT)],
            TODAY,
            7,
        )

        assert "🔴" in message.html_body
        assert "Mar 21, 2025" in message.html_body
        assert "Tomorrow" in message.html_body
        assert "#dc2626" in message.html_body
        assert "View All Tasks" in message.html_body

    def test_html_is_escaped(self):
        item = _make_item(1, 3, title="<script>alert(1)</script>", entity_name="Smith & Sons")

        message = self.renderer.render(self.recipient, [item], TODAY, 7)

        assert "<script>" not in message.html_body
        assert "&lt;script&gt;" in message.html_body
        assert "Smith &amp; Sons" in message.html_body

    def test_without_portal_url(self):
        renderer = DigestRenderer()
        message = renderer.render(self.recipient, [_make_item(1, 3)], TODAY, 7)
        assert "View All Tasks" not in message.html_body
        assert "View all tasks" not in message.text_body
