"""Notification sink registry and the ``notify`` helper used by handlers.

Notifications never block an orchestrated operation: a failing sink is
logged and the operation carries on.
"""

import os

import structlog

logger = structlog.get_logger(__name__)

_sink_instance = None


def get_notification_sink():
    """Return the configured notification sink (singleton).

    Selected by the NOTIFICATION_SINK environment variable: ``log`` (default)
    or ``fake``.
    """
    global _sink_instance
    if _sink_instance is None:
        adapter = os.environ.get("NOTIFICATION_SINK", "log")
        if adapter == "log":
            from marketplace.notifications.log_sink import LoggingNotificationSink

            _sink_instance = LoggingNotificationSink()
        elif adapter == "fake":
            from marketplace.notifications.fake_sink import FakeNotificationSink

            _sink_instance = FakeNotificationSink()
        else:
            raise ValueError(f"Unknown notification sink: {adapter}")
    return _sink_instance


def reset_notification_sink():
    """Reset the notification sink singleton (useful for testing)."""
    global _sink_instance
    _sink_instance = None


def notify(user_id, title: str, message: str, link: str | None = None) -> bool:
    """Send a notification, returning False instead of raising when it fails."""
    if not user_id:
        return False
    try:
        get_notification_sink().notify(str(user_id), title, message, link)
    except Exception as exc:
        logger.warning(
            "notification_failed",
            user_id=str(user_id),
            title=title,
            error=str(exc),
        )
        return False
    return True
