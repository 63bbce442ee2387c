"""Error message templating.

Templates use ``${name}`` placeholders filled from the rule's option bag
(merged with any out-parameters set by the handler). ``${field}`` is
always available. Placeholders without a matching value are left as-is.
"""

import re
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

REQUIRED = "required"
DEFAULT_KEY = "_default_"
DEFAULT_MESSAGE = "is invalid"

# Signature of the error renderer: (rule name, options, meta) -> message
ErrorRenderer = Callable[[str, dict[str, Any], dict[str, Any]], str]


class MessageFormatter:
    """Substitutes ``${key}`` placeholders in message templates.

    Example:
        MessageFormatter().interpolate(
            "must be between ${min} and ${max} character long",
            {"min": 1, "max": 7},
        )
        # "must be between 1 and 7 character long"
    """

    PATTERN = re.compile(r"\$\{\s*(?P<key>[\w.\-]+)\s*\}")

    def interpolate(self, template: str | None, values: Mapping[str, Any]) -> str:
        """Render a template with the given values."""
        if not template:
            return ""

        def replace(match: re.Match) -> str:
            key = match.group("key")
            if key not in values:
                return match.group(0)
            return self._format_value(values[key])

        return self.PATTERN.sub(replace, template)

    def _format_value(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, datetime):
            return value.strftime("%Y-%m-%d %H:%M:%S")
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, (list, tuple)):
            return ", ".join(self._format_value(v) for v in value)
        return str(value)


_formatter = MessageFormatter()


def interpolate(template: str | None, values: Mapping[str, Any]) -> str:
    """Render a message template with the module-level formatter."""
    return _formatter.interpolate(template, values)
