"""Notification sink that only writes structured log lines."""

import structlog

from marketplace.notifications.port import NotificationSink

logger = structlog.get_logger(__name__)


class LoggingNotificationSink(NotificationSink):
    def notify(self, user_id: str, title: str, message: str, link: str | None = None) -> None:
        logger.info("notification", user_id=str(user_id), title=title, message=message, link=link)
