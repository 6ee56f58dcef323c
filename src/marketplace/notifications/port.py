"""Notification sink port: fire-and-forget messages to a marketplace user."""

from abc import ABC, abstractmethod


class NotificationSink(ABC):
    @abstractmethod
    def notify(self, user_id: str, title: str, message: str, link: str | None = None) -> None:
        """Deliver one notification. May raise on transport failure."""
        ...
