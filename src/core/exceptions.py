"""Custom exception classes for the LIFF Group Tool API.

Every domain error carries the HTTP status it is reported with, so the
handlers registered in ``app.py`` can render them uniformly as
``{"error": message}``.
"""


class GroupToolError(Exception):
    """Base exception for all LIFF Group Tool errors."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str = None):
        """Initialize the exception.

        Args:
            message: One-line description returned to the caller.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(GroupToolError):
    """Raised when a required field is missing or invalid."""

    status_code = 400
    default_message = "Bad Request"


class UnauthorizedError(GroupToolError):
    """Raised when the admin credential is missing or invalid."""

    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(GroupToolError):
    """Raised when the caller is identified but not allowed to proceed."""

    status_code = 403
    default_message = "Forbidden"


class AccessKeyRejectedError(ForbiddenError):
    """Raised when an access key is unknown, expired or already used."""

    default_message = "Invalid or expired access key"


class NotFoundError(GroupToolError):
    """Raised when a referenced row does not exist."""

    status_code = 404
    default_message = "Not Found"


class ChannelNotFoundError(NotFoundError):
    """Raised when a channel is absent or inactive."""

    default_message = "Channel not found or inactive"


class GroupNotFoundError(NotFoundError):
    default_message = "Group not found"


class TaskNotFoundError(NotFoundError):
    default_message = "Task not found"


class TemplateNotFoundError(NotFoundError):
    default_message = "Template not found"


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


class AccessKeyNotFoundError(NotFoundError):
    default_message = "Access key not found"


class PreconditionFailedError(GroupToolError):
    """Raised when an operation needs a prior step that has not happened."""

    status_code = 400
    default_message = "Precondition failed"


class TaskNotExecutedError(PreconditionFailedError):
    default_message = "Task not executed yet"


class ConflictError(GroupToolError):
    """Raised when an operation conflicts with the current row state."""

    status_code = 409
    default_message = "Conflict"


class TaskAlreadyExecutedError(ConflictError):
    default_message = "Task is already being executed by another member"


class TaskAlreadyCompletedError(ConflictError):
    default_message = "Task is already completed"


class AccessKeyAlreadyUsedError(ConflictError):
    default_message = "Access key has already been used"
