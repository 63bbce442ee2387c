"""Core types for fieldrules.

Handlers come in three shapes, modelled as a tagged union:
- Predicate: a callable ``(value, options, params) -> bool`` (may be async)
- Pattern: a compiled regular expression the value must match
- FormatSet: an ordered mapping of format name -> handler (recursive)

Rules are normalized into RuleRecord instances, one per declared
(field, handler) pair, in declaration order.
"""

import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from fieldrules.exceptions import RuleDeclarationError

PredicateFn = Callable[[Any, dict[str, Any], dict[str, Any]], "bool | Awaitable[bool]"]

_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


@dataclass(frozen=True)
class Predicate:
    """A handler implemented as a function.

    The function receives the value, the rule's option bag and an ``params``
    dict it may fill with values to echo into the error message.
    """

    fn: PredicateFn


@dataclass(frozen=True)
class Pattern:
    """A handler implemented as a regular expression."""

    regex: re.Pattern[str]


@dataclass(frozen=True)
class FormatSet:
    """A handler made of named alternative formats (e.g. card types).

    The ``check`` option selects which members run: ``"any"`` (default),
    ``"all"``, a member name, or a list of member names.
    """

    members: dict[str, "HandlerDefinition"] = field(default_factory=dict)


HandlerDefinition = Union[Predicate, Pattern, FormatSet]


def compile_pattern(source: str) -> re.Pattern[str]:
    """Compile a pattern string, accepting the ``/body/flags`` notation."""
    match = re.fullmatch(r"/(?P<body>.*)/(?P<flags>[a-z]*)", source, re.DOTALL)
    if not match:
        return re.compile(source)
    flags = 0
    for flag in match.group("flags"):
        flags |= _REGEX_FLAGS.get(flag, 0)
    return re.compile(match.group("body"), flags)


def as_handler(definition: Any) -> HandlerDefinition:
    """Coerce a raw handler definition into the tagged union.

    Accepts an existing HandlerDefinition, a compiled regex, a pattern
    string, a mapping of format names to definitions, or a callable.

    Raises:
        RuleDeclarationError: If the definition has none of these shapes
    """
    if isinstance(definition, (Predicate, Pattern, FormatSet)):
        return definition
    if isinstance(definition, re.Pattern):
        return Pattern(definition)
    if isinstance(definition, str):
        try:
            return Pattern(compile_pattern(definition))
        except re.error as e:
            raise RuleDeclarationError(f"Invalid pattern {definition!r}: {e}") from e
    if isinstance(definition, Mapping):
        return FormatSet({str(k): as_handler(v) for k, v in definition.items()})
    if callable(definition):
        return Predicate(definition)
    raise RuleDeclarationError(
        f"Unsupported handler definition of type {type(definition).__name__}"
    )


# Option keys with a dedicated RuleRecord attribute
RESERVED_OPTIONS = ("message", "required", "skipNull", "skipEmpty", "check", "format", "on", "not")


@dataclass
class RuleRecord:
    """A normalized rule: one handler applied to one field path.

    Attributes:
        field: Dotted field path, may contain ``*`` segments
        handler: Handler name, without any ``not:`` prefix
        negated: True when declared as ``not:<handler>``
        message: Custom message template, overrides registry messages
        required: Missing fields fail with the "required" message
        skip_null: Skip values that are None
        skip_empty: Skip falsy values
        check: FormatSet selector ("any", "all", a name or list of names)
        on: Event tags this rule is limited to (None means every event)
        options: Handler-specific options (min, max, list, ...)
    """

    field: str
    handler: str
    negated: bool = False
    message: str | None = None
    required: bool = True
    skip_null: bool = False
    skip_empty: bool = False
    check: str | list[str] = "any"
    on: list[str] | None = None
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        """The rule name as declared, used to look up its message."""
        return f"not:{self.handler}" if self.negated else self.handler

    def applies_to(self, events: list[str]) -> bool:
        """Whether the rule runs under the given active events."""
        if not events or not self.on:
            return True
        return any(event in self.on for event in events)

    def to_options(self) -> dict[str, Any]:
        """Build the option bag handed to handlers and message rendering."""
        bag: dict[str, Any] = {
            "message": self.message,
            "required": self.required,
            "skipNull": self.skip_null,
            "skipEmpty": self.skip_empty,
            "check": self.check,
            "on": self.on,
            "not": self.negated,
        }
        bag.update(self.options)
        bag["field"] = self.field
        return bag
