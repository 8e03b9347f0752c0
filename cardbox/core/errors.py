from typing import Any, Dict


class CardboxError(Exception):
    """
    Base of every recoverable failure raised by the collection, the tag index
    and quiz sessions. ``context`` holds the offending id / tag name so the
    caller can build its own message.
    """

    status_code: int = 422

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "error": type(self).__name__}
        if self.context:
            body["context"] = self.context
        return body


class NotFoundError(CardboxError):
    """Unknown card id, unknown tag, unknown session or an empty search."""

    status_code = 404


class DuplicateQuestionError(CardboxError):
    status_code = 409


class DuplicateTagError(CardboxError):
    status_code = 409


class WrongVariantError(CardboxError):
    pass


class InvalidOptionsError(CardboxError):
    pass


class InvalidTransitionError(CardboxError):
    pass


class ValidationError(CardboxError):
    """Empty or blank required text."""
