import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

class Level(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

_LOG_LEVELS = {
    Level.SUCCESS: logging.INFO,
    Level.INFO: logging.INFO,
    Level.WARNING: logging.WARNING,
    Level.ERROR: logging.ERROR,
}

@dataclass(frozen=True)
class Notification:
    level: Level
    message: str

class Notifier:
    """
    Collects toast-style notices for the view. A listener, if given, is
    called with every notice as it is raised.
    """

    def __init__(self, listener: Optional[Callable[[Notification], None]] = None):
        self.listener = listener
        self.history: List[Notification] = []

    def notify(self, level: Level, message: str) -> Notification:
        notice = Notification(level, message)
        self.history.append(notice)
        logger.log(_LOG_LEVELS[level], "[%s] %s", level.value, message)
        if self.listener:
            self.listener(notice)
        return notice

    def success(self, message: str) -> Notification:
        return self.notify(Level.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self.notify(Level.INFO, message)

    def warning(self, message: str) -> Notification:
        return self.notify(Level.WARNING, message)

    def error(self, message: str) -> Notification:
        return self.notify(Level.ERROR, message)

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def messages(self, level: Optional[Level] = None) -> List[str]:
        return [n.message for n in self.history if level is None or n.level == level]
