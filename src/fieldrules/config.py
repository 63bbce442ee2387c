"""Validator and CLI configuration."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from fieldrules.exceptions import FieldRulesError

if TYPE_CHECKING:
    from fieldrules.messages import ErrorRenderer

CONFIG_KEYS = ("handlers", "error", "meta", "messages")


@dataclass
class ValidatorConfig:
    """Construction options of a Validator.

    Attributes:
        handlers: Local handler definitions, by name
        error: Error renderer ``(name, options, meta) -> str``; None keeps
            the default template renderer
        meta: Opaque data handed to the error renderer
        messages: Local message templates, by rule name
    """

    handlers: dict[str, Any] = field(default_factory=dict)
    error: ErrorRenderer | None = None
    meta: dict[str, Any] = field(default_factory=dict)
    messages: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ValidatorConfig:
        """Create config from a mapping; unknown keys are rejected.

        Raises:
            FieldRulesError: On unknown keys or a non-callable ``error``
        """
        unknown = sorted(set(data) - set(CONFIG_KEYS))
        if unknown:
            raise FieldRulesError(f"Unknown validator option(s): {', '.join(unknown)}")

        error = data.get("error")
        if error is not None and not callable(error):
            raise FieldRulesError("The 'error' option must be callable")

        return cls(
            handlers=dict(data.get("handlers") or {}),
            error=error,
            meta=dict(data.get("meta") or {}),
            messages=dict(data.get("messages") or {}),
        )


@dataclass
class CliSettings:
    """Settings of the command-line interface."""

    log_level: str = "WARNING"
    events: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> CliSettings:
        """Create settings from environment variables.

        - FIELDRULES_LOG_LEVEL: logging level name (default WARNING)
        - FIELDRULES_EVENTS: comma separated default events
        """
        level = os.environ.get("FIELDRULES_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
        events = [
            event.strip()
            for event in os.environ.get("FIELDRULES_EVENTS", "").split(",")
            if event.strip()
        ]
        return cls(log_level=level, events=events)

    @property
    def level(self) -> int:
        """Numeric logging level; unknown names fall back to WARNING."""
        value = logging.getLevelName(self.log_level)
        return value if isinstance(value, int) else logging.WARNING
