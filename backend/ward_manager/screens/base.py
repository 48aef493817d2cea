"""Shared pieces of the screen controllers."""
import itertools
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from ..models.base import utcnow


class NotificationLevel:
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    """Transient user-facing notice."""
    level: str
    message: str
    created_at: datetime = field(default_factory=utcnow)


class RequestSequencer:
    """
    Tags outgoing requests with increasing tokens so a screen can drop a
    response that arrives after a newer request of the same kind was issued.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest = 0

    def issue(self) -> int:
        self._latest = next(self._counter)
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    @property
    def latest(self) -> int:
        return self._latest


class Screen:
    def __init__(self):
        self.notifications: List[Notification] = []

    def notify_success(self, message: str) -> None:
        self.notifications.append(Notification(NotificationLevel.SUCCESS, message))

    def notify_error(self, message: str) -> None:
        self.notifications.append(Notification(NotificationLevel.ERROR, message))

    def drain_notifications(self) -> List[Notification]:
        pending, self.notifications = self.notifications, []
        return pending
