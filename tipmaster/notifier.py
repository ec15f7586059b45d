"""
User-facing status and error messages
"""
import logging
import sys

INFO = "info"
DESTRUCTIVE = "destructive"
SEVERITIES = (INFO, DESTRUCTIVE)

logger = logging.getLogger(__name__)


class Notifier:
    """Fire-and-forget sink for toast-style messages"""

    def notify(self, title: str, message: str, severity: str = INFO) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Routes messages to the log; destructive ones as errors"""

    def notify(self, title: str, message: str, severity: str = INFO) -> None:
        level = logging.ERROR if severity == DESTRUCTIVE else logging.INFO
        logger.log(level, "%s: %s", title, message)


class ConsoleNotifier(Notifier):
    """Prints messages to a stream, stderr by default"""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr

    def notify(self, title: str, message: str, severity: str = INFO) -> None:
        marker = "!!" if severity == DESTRUCTIVE else "--"
        print(f"{marker} {title}: {message}", file=self.stream)
