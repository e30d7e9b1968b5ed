"""Collaborator interface to the host editor: messages, prompts, configuration panel."""

import logging
import uuid
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

from ..models.launch import ConfigurePrompt

logger = logging.getLogger(__name__)


class NotificationType(Enum):
    """Types of notifications."""
    INFO = "info"
    ERROR = "error"
    CONFIGURE = "configure"


@dataclass
class Notification:
    """A message queued for the host to display."""
    message: str
    notification_type: NotificationType
    ide_id: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "type": self.notification_type.value,
            "ide_id": self.ide_id,
            "timestamp": self.timestamp.isoformat(),
        }


class HostBridge(ABC):
    """What the launch core needs from the editor hosting it."""

    @abstractmethod
    def show_error(self, message: str) -> None:
        pass

    @abstractmethod
    def show_info(self, message: str) -> None:
        pass

    @abstractmethod
    async def prompt_configure(self, prompt: ConfigurePrompt) -> Optional[str]:
        """Ask the user; return the chosen option, or None when nobody answered."""
        pass

    @abstractmethod
    def open_configuration(self, highlight_ide: Optional[str] = None) -> None:
        """Open the configuration panel, highlighting ``highlight_ide``."""
        pass


class LoggingHostBridge(HostBridge):
    """Non-interactive host: everything goes to the log."""

    def show_error(self, message: str) -> None:
        logger.error(message)

    def show_info(self, message: str) -> None:
        logger.info(message)

    async def prompt_configure(self, prompt: ConfigurePrompt) -> Optional[str]:
        logger.warning(prompt.message)
        return None

    def open_configuration(self, highlight_ide: Optional[str] = None) -> None:
        logger.info(f"Configuration requested for {highlight_ide or 'all IDEs'}")


class NotificationHostBridge(HostBridge):
    """Queues notifications for a remote host (the HTTP API) to poll."""

    def __init__(self, max_notifications: int = 100):
        self._notifications: Deque[Notification] = deque(maxlen=max_notifications)

    def _push(self, notification: Notification) -> None:
        self._notifications.append(notification)
        logger.debug(f"Queued {notification.notification_type.value} notification: {notification.message}")

    def show_error(self, message: str) -> None:
        self._push(Notification(message, NotificationType.ERROR))

    def show_info(self, message: str) -> None:
        self._push(Notification(message, NotificationType.INFO))

    async def prompt_configure(self, prompt: ConfigurePrompt) -> Optional[str]:
        # The prompt also travels back in the launch outcome; the host answers there.
        return None

    def open_configuration(self, highlight_ide: Optional[str] = None) -> None:
        self._push(Notification("Open configuration", NotificationType.CONFIGURE, ide_id=highlight_ide))

    def pop_all(self) -> List[Notification]:
        items = list(self._notifications)
        self._notifications.clear()
        return items
