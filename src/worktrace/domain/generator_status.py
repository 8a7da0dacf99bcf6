"""
Run-wide status message aggregation for multi-step generation runs.

Independent of the result tree: the tracker collects flat, ordered
messages for an end-of-run summary. Printing them is left to a renderer
(see infrastructure/console.py).
"""

from collections.abc import Iterable

from worktrace.domain.exceptions import InvalidArgument, InvalidState
from worktrace.domain.models import StatusMessage, StatusMessageType


class GeneratorStatusTracker:
    """Ordered, append-only status messages plus a running/aborted/completed flag set."""

    def __init__(self) -> None:
        self.running = False
        self.aborted = False
        self.completed = False
        self._messages: list[StatusMessage] = []
        self._failure_count = 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, message: StatusMessage | None = None) -> None:
        if self.aborted or self.completed:
            raise InvalidState("Cannot start an aborted or completed generator run")
        self.running = True
        if message is not None:
            self.add_status_message(message)

    def abort(self, message: StatusMessage | None = None) -> None:
        if self.completed or not self.running:
            raise InvalidState("Cannot abort a generator run that is not running")
        self.running = False
        self.aborted = True
        if message is not None:
            self.add_status_message(message)

    def complete(self, messages: Iterable[StatusMessage] | None = None) -> None:
        if self.aborted or not self.running:
            raise InvalidState("Cannot complete a generator run that is not running")
        self.running = False
        self.completed = True
        for message in messages or ():
            self.add_status_message(message)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def add_message(self, message: str, is_failure: bool = False) -> StatusMessage:
        """Append a plain message. Failures are typed as error messages."""
        if not isinstance(message, str) or not message.strip():
            raise InvalidArgument("Status message must be a non-empty string")
        entry = StatusMessage(
            message=message,
            is_failure=is_failure,
            message_type=(
                StatusMessageType.ERROR if is_failure else StatusMessageType.INFO
            ),
        )
        self.add_status_message(entry)
        return entry

    def add_status_message(self, message: StatusMessage) -> None:
        if not isinstance(message, StatusMessage):
            raise InvalidArgument(
                f"Expected StatusMessage, got {type(message).__name__}"
            )
        if not message.message.strip():
            raise InvalidArgument("Status message must be a non-empty string")
        self._messages.append(message)
        if message.is_failure:
            self._failure_count += 1

    @property
    def messages(self) -> tuple[StatusMessage, ...]:
        return tuple(self._messages)

    def has_failures(self) -> bool:
        return self._failure_count > 0

    def _has_type(self, message_type: StatusMessageType) -> bool:
        return any(m.message_type is message_type for m in self._messages)

    @property
    def has_error(self) -> bool:
        return self._has_type(StatusMessageType.ERROR) or self._has_type(
            StatusMessageType.FATAL
        )

    @property
    def has_warning(self) -> bool:
        return self._has_type(StatusMessageType.WARNING)

    @property
    def has_success(self) -> bool:
        return self._has_type(StatusMessageType.SUCCESS)

    @property
    def has_info(self) -> bool:
        return self._has_type(StatusMessageType.INFO)
