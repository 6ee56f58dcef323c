"""Fake notification sink that keeps every message in memory."""

from marketplace.notifications.port import NotificationSink


class FakeNotificationSink(NotificationSink):
    def __init__(self):
        self.sent: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification service unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification service unavailable"):
        """Configure the fake sink behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def notify(self, user_id: str, title: str, message: str, link: str | None = None) -> None:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        self.sent.append({"user_id": str(user_id), "title": title, "message": message, "link": link})

    def sent_to(self, user_id: str) -> list[dict]:
        return [n for n in self.sent if n["user_id"] == str(user_id)]
