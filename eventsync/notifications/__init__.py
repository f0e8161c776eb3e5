"""Notification dispatch."""

from .dispatcher import NotificationDispatcher, NotificationRequest

__all__ = ['NotificationDispatcher', 'NotificationRequest']
