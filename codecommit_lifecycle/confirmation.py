"""
Input checks that run before any job is scheduled.

The predicates are pure so a front end can call them on every keystroke
to enable or disable its OK button; the ``require_*`` variants raise
ValidationError for the service layer.
"""

from codecommit_lifecycle.exceptions import ValidationError

MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000


class ConfirmationGate:
    """Gate for destructive actions: the typed token must equal the expected one."""

    @staticmethod
    def validate(expected: str, typed: str | None) -> bool:
        """
        Return True iff ``typed`` is exactly ``expected``.

        No trimming and no case folding. An empty ``expected`` never
        validates.
        """
        if not expected or typed is None:
            return False
        return typed == expected


def is_valid_repository_name(name: str | None) -> bool:
    return bool(name) and len(name) <= MAX_NAME_LENGTH


def require_confirmation(expected: str, typed: str | None) -> None:
    """
    Raise unless the confirmation token matches the repository name.

    Raises:
        ValidationError: On any mismatch
    """
    if not ConfirmationGate.validate(expected, typed):
        raise ValidationError(
            f"Confirmation does not match repository name {expected!r}",
            code="CONFIRMATION_MISMATCH",
        )


def require_repository_name(name: str | None) -> None:
    """
    Raises:
        ValidationError: If the name is empty or too long
    """
    if not name:
        raise ValidationError("Repository name is required", code="NAME_REQUIRED")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Repository name exceeds {MAX_NAME_LENGTH} characters",
            code="NAME_TOO_LONG",
        )


def require_description(description: str | None) -> None:
    """
    Raises:
        ValidationError: If the description is too long
    """
    if description and len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Repository description exceeds {MAX_DESCRIPTION_LENGTH} characters",
            code="DESCRIPTION_TOO_LONG",
        )
