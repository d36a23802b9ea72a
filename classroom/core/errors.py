"""Classroom errors - application exception hierarchy.

Every failure is scoped to the single user operation in progress; nothing
here is fatal to the process and nothing is retried automatically.
"""


class ClassroomError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# =============================================================================
# VALIDATION (rejected synchronously, no state change)
# =============================================================================


class ValidationError(ClassroomError):
    """Malformed input rejected before any state change."""

    status_code = 400


class AttemptValidationError(ValidationError):
    """Invalid quiz start or answer selection."""


class SubmissionValidationError(ValidationError):
    """Invalid assignment submission or grade."""


class QuizValidationError(ValidationError):
    """Quiz draft rejected, e.g. wrong number of questions."""


class GenerationValidationError(ValidationError):
    """Empty prompt or topic sent to the generator."""


# =============================================================================
# STATE / LOOKUP
# =============================================================================


class AttemptStateError(ClassroomError):
    """Operation not allowed in the attempt's current state."""

    status_code = 409


class QuizStateError(ClassroomError):
    """Quiz change not allowed, e.g. editing or republishing a published quiz."""

    status_code = 409


class NotFoundError(ClassroomError):
    """Requested record does not exist."""

    status_code = 404


# =============================================================================
# EXTERNAL CALLS
# =============================================================================


class StoreError(ClassroomError):
    """Document or blob store read/write failed."""

    status_code = 502


class GenerationError(ClassroomError):
    """Generation endpoint failed or returned an unusable payload."""

    status_code = 502


class QuizParseError(ClassroomError):
    """Generated text did not match the expected quiz format.

    Always a total failure of the generation request: no partial quiz is
    ever returned.
    """

    status_code = 422

    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number
