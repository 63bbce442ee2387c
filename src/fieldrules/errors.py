"""Collected validation errors."""


class ErrorCollector:
    """Insertion-ordered map of resolved field key -> rendered messages.

    Keys appear in the order their first error was recorded; messages for a
    key keep the order in which the failing rules ran.
    """

    def __init__(self) -> None:
        self._errors: dict[str, list[str]] = {}

    def add(self, key: str, message: str) -> None:
        self._errors.setdefault(key, []).append(message)

    def clear(self) -> None:
        self._errors = {}

    def to_dict(self) -> dict[str, list[str]]:
        """Copy of the errors, safe for callers to mutate."""
        return {key: list(messages) for key, messages in self._errors.items()}
