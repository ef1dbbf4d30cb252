"""Errors raised by the task and assignment services.

Every error carries a stable machine-readable ``error_code`` and the HTTP
status the API layer answers with. Callers inside the process catch the
typed classes; the API layer turns them into ``to_dict()`` bodies.
"""

from typing import Any


class TaskServiceError(Exception):
    error_code = "task_service_error"
    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": False,
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidTaskError(TaskServiceError):
    """Malformed task input (empty or too-long title, unknown priority)."""

    error_code = "validation_error"
    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, {"field": field} if field else None)


class NotFoundError(TaskServiceError):
    """Absent or outside the caller's team. The two cases are never told apart."""

    error_code = "not_found"
    status_code = 404


class TaskNotFound(NotFoundError):
    error_code = "task_not_found"

    def __init__(self) -> None:
        super().__init__("Task not found")


class TargetNotFound(NotFoundError):
    error_code = "target_not_found"

    def __init__(self) -> None:
        super().__init__("Target user not found in your team")


class AssignmentNotFound(NotFoundError):
    error_code = "assignment_not_found"

    def __init__(self) -> None:
        super().__init__("Assignment not found")


class Forbidden(TaskServiceError):
    """The acting user lacks ``capability``; says nothing about the target."""

    error_code = "forbidden"
    status_code = 403

    def __init__(self, capability: str) -> None:
        self.capability = capability
        super().__init__(
            f"Only the task creator or an administrator may {capability}",
            {"capability": capability},
        )


class AlreadyAssigned(TaskServiceError):
    error_code = "already_assigned"
    status_code = 400

    def __init__(self) -> None:
        super().__init__("User is already assigned to this task")
