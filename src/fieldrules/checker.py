"""Check execution: evaluates one handler definition against one value."""

import inspect
from typing import Any

from fieldrules.types import FormatSet, HandlerDefinition, Pattern, Predicate

ANY = "any"
ALL = "all"


def pattern_subject(value: Any) -> str:
    """String form of a value for regular expression matching."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _selected(check: Any) -> list[str]:
    if isinstance(check, (list, tuple, set)):
        return [str(name) for name in check]
    return [str(check)]


async def check_handler(
    value: Any,
    handler: HandlerDefinition,
    options: dict[str, Any] | None = None,
    params: dict[str, Any] | None = None,
) -> bool:
    """Run a handler against a value.

    Args:
        value: The value to check
        handler: Predicate, Pattern or FormatSet
        options: Rule options; ``check`` selects FormatSet members
        params: Out-parameters a predicate may fill for message rendering

    Returns:
        True if the value passes
    """
    options = {"check": ANY, **(options or {})}
    if params is None:
        params = {}

    if isinstance(handler, Predicate):
        result = handler.fn(value, options, params)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    if isinstance(handler, Pattern):
        return handler.regex.search(pattern_subject(value)) is not None

    if isinstance(handler, FormatSet):
        return await _check_formats(value, handler, options, params)

    raise TypeError(f"Unsupported handler type: {type(handler).__name__}")


async def _check_formats(
    value: Any,
    formats: FormatSet,
    options: dict[str, Any],
    params: dict[str, Any],
) -> bool:
    check = options.get("check", ANY)
    run_all = check == ALL
    run_any = check == ANY or check is None
    selected = [] if run_all or run_any else _selected(check)

    success = True
    for name, member in formats.members.items():
        if selected and name not in selected:
            continue
        passed = await check_handler(value, member, options, params)
        if run_all:
            if not passed:
                return False
            continue
        if passed:
            return True
        success = False
    return success
