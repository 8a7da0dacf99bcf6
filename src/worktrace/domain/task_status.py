"""Append-only status message log for a single long-running task."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from worktrace.domain.exceptions import InvalidArgument
from worktrace.domain.models import TimedMessage

if TYPE_CHECKING:
    from worktrace.domain.result import ResultNode

logger = logging.getLogger(__name__)

MessageListener = Callable[[TimedMessage], None]


class TaskStatusTracker:
    """
    Records timestamped, human-readable status messages for a named task.

    The tracker performs no I/O. A console or UI collaborator either reads
    get_messages() in batch or subscribes to be pushed each new message.
    """

    def __init__(
        self,
        task_name: str,
        *,
        show_timer: bool = False,
        result: "ResultNode | None" = None,
    ) -> None:
        """
        Args:
            task_name: Name of the task whose progress is reported
            show_timer: Prefix status_line() with the elapsed time of `result`
            result: Result node whose duration drives the timer prefix
        """
        if not isinstance(task_name, str) or not task_name.strip():
            raise InvalidArgument("Task name must be a non-empty string")
        self.task_name = task_name
        self.show_timer = show_timer
        self.result = result
        self._messages: list[TimedMessage] = []
        self._listeners: list[MessageListener] = []

    def record(self, message: str) -> TimedMessage:
        """
        Append a timestamped message.

        Raises:
            InvalidArgument: If message is not a non-empty string
        """
        if not isinstance(message, str) or not message:
            raise InvalidArgument(
                f"Status message for task '{self.task_name}' must be a non-empty string"
            )
        entry = TimedMessage(timestamp=datetime.now(timezone.utc), message=message)
        self._messages.append(entry)
        logger.debug("[%s] %s", self.task_name, message)
        for listener in self._listeners:
            listener(entry)
        return entry

    def get_messages(self) -> tuple[TimedMessage, ...]:
        return tuple(self._messages)

    def subscribe(self, listener: MessageListener) -> None:
        """Push every subsequently recorded message to `listener`."""
        self._listeners.append(listener)

    @property
    def current_message(self) -> str | None:
        return self._messages[-1].message if self._messages else None

    @property
    def previous_message(self) -> str | None:
        return self._messages[-2].message if len(self._messages) > 1 else None

    def status_line(self) -> str:
        """Current message, prefixed with [elapsed] when the timer is on."""
        message = self.current_message or ""
        if self.show_timer and self.result is not None:
            return f"[{self.result.duration_string}] {message}".rstrip()
        return message
