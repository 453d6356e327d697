from __future__ import annotations

from typing import Any, List, Optional, Sequence

from django.core.exceptions import ObjectDoesNotExist, ValidationError


class DefaultDataError(Exception):
    pass


class AlreadyBootstrapped(DefaultDataError):
    def __init__(self, message: str = "Some configuration data is already loaded.") -> None:
        super().__init__(message)


DataAlreadyLoaded = AlreadyBootstrapped


class InvalidConfiguration(DefaultDataError, ValueError):
    def __init__(self, message: str, errors: Optional[Sequence[str]] = None) -> None:
        self.errors: List[str] = list(errors or [])
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)


class RecordInvalid(DefaultDataError):
    """A record failed validation in the store; the surrounding transaction is rolled back."""

    def __init__(self, kind: str, record: str, messages: Sequence[str]) -> None:
        self.kind = kind
        self.record = record
        self.messages = list(messages)
        detail = "; ".join(self.messages) or "invalid record"
        super().__init__(f"{kind} {record!r} is invalid: {detail}")

    @classmethod
    def from_exception(cls, kind: str, record: Any, exc: Exception) -> "RecordInvalid":
        if isinstance(exc, ValidationError):
            messages = _validation_messages(exc)
        elif isinstance(exc, ObjectDoesNotExist):
            messages = [f"referenced record not found ({exc})"]
        else:
            messages = [str(exc)]
        return cls(kind, str(record), messages)


def _validation_messages(exc: ValidationError) -> List[str]:
    if hasattr(exc, "error_dict"):
        messages = []
        for field, errors in sorted(exc.message_dict.items()):
            for message in errors:
                messages.append(message if field == "__all__" else f"{field}: {message}")
        return messages
    return list(exc.messages)
