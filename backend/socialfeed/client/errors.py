from enum import Enum, unique

__all__ = [
    "ErrorCategory",
    "classify_error",
    "toast_message",
]


@unique
class ErrorCategory(str, Enum):
    RATE_LIMIT = "rate_limit"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    GENERIC = "generic"


# Checked in order, the first matching substring wins
_MARKERS: tuple[tuple[ErrorCategory, tuple[str, ...]], ...] = (
    (
        ErrorCategory.RATE_LIMIT,
        ("rate limit", "too many", "too quickly", "please wait", "limit reached"),
    ),
    (
        ErrorCategory.AUTH,
        ("not authenticated", "not authorized", "unauthorized", "sign in"),
    ),
    (ErrorCategory.NOT_FOUND, ("not found",)),
)

_TOASTS = {
    ErrorCategory.RATE_LIMIT: "You're doing that too fast. Please wait a moment and try again.",
    ErrorCategory.AUTH: "Please sign in to do that.",
    ErrorCategory.NOT_FOUND: "This item no longer exists.",
    ErrorCategory.GENERIC: "Something went wrong. Please try again.",
}


def classify_error(message: str | None) -> ErrorCategory:
    """
    Sort an error message into one of the toast categories by substring match.
    Matching is case-insensitive.
    """
    lowered = (message or "").lower()
    for category, markers in _MARKERS:
        if any(marker in lowered for marker in markers):
            return category
    return ErrorCategory.GENERIC


def toast_message(category: ErrorCategory, message: str | None = None) -> str:
    # Rate limit messages already tell the user how long to wait
    if category == ErrorCategory.RATE_LIMIT and message:
        return message
    return _TOASTS[category]
