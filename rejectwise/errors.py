"""
Exceptions raised by rejectwise.
"""


class RejectWiseError(Exception):
    """Base class for rejectwise errors."""


class ExtractionError(RejectWiseError):
    """Feedback text could not be turned into a rejection record.

    Raised when the extraction service answers with a non-2xx status,
    when the transport fails, or when the reply is not the expected JSON
    shape. The message is meant to be shown to the user as-is.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ExtractionTimeoutError(ExtractionError):
    """The extraction service did not answer in time."""


class PersistenceError(RejectWiseError):
    """Reading or writing the storage blob failed."""


class SubmissionInProgressError(RejectWiseError):
    """A feedback submission is already waiting on the extraction service."""


class SkillGapNotFoundError(RejectWiseError, KeyError):
    """No skill gap exists for the requested area."""

    def __str__(self):
        return str(self.args[0]) if self.args else ""
