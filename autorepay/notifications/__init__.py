"""Notification channels and the event dispatcher."""
from .dispatcher import NotificationDispatcher, format_event
from .email import EmailNotifier
from .telegram import TelegramNotifier

__all__ = ["EmailNotifier", "NotificationDispatcher", "TelegramNotifier", "format_event"]
