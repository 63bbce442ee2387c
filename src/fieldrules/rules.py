"""Rule declaration normalization.

Rules are declared per field in any of these shapes:

    "email"                                   # bare handler name
    {"not:empty": "please enter a title"}     # name -> message
    {"lengthBetween": {"min": 1, "max": 7}}   # name -> options
    [{"not:empty": ...}, "email"]             # list of any of the above

Each (field, handler) pair becomes a RuleRecord. Declaring the same pair
twice appends a second record; declaration order is evaluation order and
error message order.
"""

from collections.abc import Iterator, Mapping
from typing import Any

from fieldrules.exceptions import RuleDeclarationError
from fieldrules.types import RESERVED_OPTIONS, RuleRecord

NEGATION_PREFIX = "not:"

DEFAULT_OPTIONS: dict[str, Any] = {
    "message": None,
    "required": True,
    "skipNull": False,
    "skipEmpty": False,
    "check": "any",
    "on": None,
}


def parse_rule_name(name: str) -> tuple[str, bool]:
    """Split a declared rule name into (handler name, negated)."""
    if name.startswith(NEGATION_PREFIX):
        return name[len(NEGATION_PREFIX):], True
    return name, False


def _as_events(on: Any) -> list[str] | None:
    if on is None or on == []:
        return None
    if isinstance(on, str):
        return [on]
    return [str(event) for event in on]


def make_record(field: str, name: str, options: Mapping[str, Any] | str | None) -> RuleRecord:
    """Build a RuleRecord from a rule name and its declared options.

    Defaults fill in any option the declaration leaves out.
    """
    if options is None:
        options = {}
    elif isinstance(options, str):
        options = {"message": options}
    elif not isinstance(options, Mapping):
        raise RuleDeclarationError(
            f"Options for rule '{name}' on '{field}' must be a message or a mapping, "
            f"got {type(options).__name__}"
        )

    merged = {**DEFAULT_OPTIONS, **options}
    if "check" not in options and options.get("format") is not None:
        merged["check"] = options["format"]

    handler, negated = parse_rule_name(name)
    return RuleRecord(
        field=field,
        handler=handler,
        negated=negated,
        message=merged["message"],
        required=bool(merged["required"]),
        skip_null=bool(merged["skipNull"]),
        skip_empty=bool(merged["skipEmpty"]),
        check=merged["check"],
        on=_as_events(merged["on"]),
        options={k: v for k, v in options.items() if k not in RESERVED_OPTIONS},
    )


def normalize(field: str, declarations: Any) -> list[RuleRecord]:
    """Normalize a rule declaration of any accepted shape into records."""
    if isinstance(declarations, (list, tuple)):
        records: list[RuleRecord] = []
        for declaration in declarations:
            records.extend(normalize(field, declaration))
        return records

    if isinstance(declarations, str):
        return [make_record(field, declarations, {})]

    if isinstance(declarations, Mapping):
        return [make_record(field, str(name), options) for name, options in declarations.items()]

    raise RuleDeclarationError(
        f"Rules for '{field}' must be a string, a mapping or a list, "
        f"got {type(declarations).__name__}"
    )


class RuleSet:
    """Ordered collection of normalized rules, grouped by field path.

    Fields iterate in the order they were first declared.
    """

    def __init__(self) -> None:
        self._rules: dict[str, list[RuleRecord]] = {}

    def add(self, field: str, declarations: Any) -> list[RuleRecord]:
        """Append the rules declared for ``field``; returns the new records."""
        records = normalize(field, declarations)
        self._rules.setdefault(field, []).extend(records)
        return records

    def fields(self) -> list[str]:
        return list(self._rules)

    def items(self) -> Iterator[tuple[str, list[RuleRecord]]]:
        for field, records in self._rules.items():
            yield field, list(records)
