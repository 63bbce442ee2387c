"""Built-in handlers shipped with fieldrules.

Available handlers:
- accepted: boolean-like values (true/false, 0/1, yes/no, on/off, "")
- alphaNumeric: letters and digits only, any script
- boolean: true/false, 0/1, "0"/"1"
- creditCard: card number formats (check: amex, visa, ...); deep runs Luhn
- date, dateAfter, dateBefore: dates and date comparisons (option: date)
- decimal: decimal numbers (option: precision)
- email, empty, equalTo (options: key, data), inList (option: list)
- inRange (options: lower, upper), integer, ip (check: ipv4, ipv6)
- length, lengthBetween, lengthMax, lengthMin (options: length, min, max)
- luhn, max, min, money (check: left, right), numeric, phone
- regex, time, url, uuid
"""

import math
import re
from collections.abc import Mapping
from datetime import date, datetime, time
from typing import Any

from fieldrules.checker import check_handler
from fieldrules.handlers.patterns import (
    ALPHA_NUMERIC_PATTERN,
    CREDIT_CARD_PATTERNS,
    DECIMAL_PATTERN,
    EMAIL_PATTERN,
    EMPTY_PATTERN,
    INTEGER_PATTERN,
    IPV4_PATTERN,
    IPV6_PATTERN,
    MONEY_PATTERNS,
    NUMERIC_PREFIX_PATTERN,
    PHONE_PATTERN,
    TIME_PATTERN,
    URL_PATTERN,
    UUID_PATTERN,
)
from fieldrules.types import FormatSet, HandlerDefinition, Pattern, Predicate

DATE_DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

ACCEPTED_VALUES = (0, 1, "0", "1", "", "true", "false", "yes", "no", "on", "off")

BUILTIN_MESSAGES: dict[str, str] = {
    "accepted": "must be accepted",
    "alphaNumeric": "must contain only letters a-z and/or numbers 0-9",
    "boolean": "must be a boolean",
    "creditCard": "must be a valid credit card number",
    "date": "is not a valid date",
    "dateAfter": "must be date after ${date}",
    "dateBefore": "must be date before ${date}",
    "decimal": "must be decimal",
    "email": "is not a valid email address",
    "equalTo": "must be the equal to the field `${key}`",
    "empty": "must be a empty",
    "not:empty": "must not be a empty",
    "inList": "must contain a valid value",
    "not:inList": "must contain a valid value",
    "inRange": "must be inside the range",
    "not:inRange": "must be ouside the range",
    "integer": "must be an integer",
    "ip": "must be an ip",
    "length": "must be longer than ${length}",
    "lengthBetween": "must be between ${min} and ${max} characters",
    "lengthMax": "must contain less than ${length} characters",
    "lengthMin": "must contain greater than ${length} characters",
    "luhn": "must be a valid credit card number",
    "max": "must be no more than ${max}",
    "min": "must be at least ${min}",
    "money": "must be a valid monetary amount",
    "numeric": "must be numeric",
    "phone": "must be a phone number",
    "regex": "contains invalid characters",
    "required": "is required",
    "time": "must be a valid time",
    "url": "not a URL",
    "uuid": "must be a valid UUID",
}


# =============================================================================
# Helpers
# =============================================================================


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(value: Any) -> float | None:
    """Read a number from a number or numeric string; None otherwise."""
    if _is_number(value):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0
        try:
            return float(text)
        except ValueError:
            return None
    return None


# Marks a bound option that is set but not numeric
_INVALID = object()


def _bound(options: dict[str, Any], key: str) -> Any:
    """Read a numeric bound option: None when unset, _INVALID when not a number."""
    raw = options.get(key)
    if raw is None:
        return None
    if isinstance(raw, str) and raw.strip() == "":
        return _INVALID
    number = _to_number(raw)
    return _INVALID if number is None else number


def to_datetime(value: Any) -> datetime | None:
    """Parse a value into a datetime, or None if it is not a date."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if _is_number(value):
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _comparable(left: datetime, right: datetime) -> tuple[datetime, datetime]:
    # Mixed naive/aware datetimes cannot be ordered; compare wall-clock times
    if (left.tzinfo is None) != (right.tzinfo is None):
        return left.replace(tzinfo=None), right.replace(tzinfo=None)
    return left, right


def _loose_equals(left: Any, right: Any) -> bool:
    """Equality that treats numbers and their string forms as equal."""
    if left == right:
        return True
    if _is_number(left) and isinstance(right, str):
        return _to_number(right) == left and right.strip() != ""
    if _is_number(right) and isinstance(left, str):
        return _to_number(left) == right and left.strip() != ""
    return False


def luhn_valid(value: Any) -> bool:
    """Validate a digit string with the Luhn checksum."""
    if not isinstance(value, str) or value == "":
        return False
    if not all(c in "0123456789" for c in value):
        return False
    total = 0
    for position, char in enumerate(reversed(value)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


# =============================================================================
# Predicates
# =============================================================================


def accepted(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return True
    return value in ACCEPTED_VALUES


def boolean(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    if isinstance(value, bool):
        return True
    return value in (0, 1, "0", "1")


async def alpha_numeric(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    if not value and value != "0":
        return False
    return await check_handler(value, Pattern(ALPHA_NUMERIC_PATTERN), options, params)


async def credit_card(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    if value is None:
        return False
    number = re.sub(r"[- ]", "", str(value))
    if len(number) < 13:
        return False
    if not await check_handler(number, CREDIT_CARD_FORMATS, options, params):
        return False
    return luhn_valid(number) if options.get("deep") else True


def is_date(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    return to_datetime(value) is not None


def _compare_dates(value: Any, options: dict[str, Any], params: dict[str, Any], after: bool) -> bool:
    if options.get("date") is None:
        return False
    reference = to_datetime(options["date"])
    if reference is None:
        return False
    params["date"] = reference.strftime(DATE_DISPLAY_FORMAT)
    current = to_datetime(value)
    if current is None:
        return False
    current, reference = _comparable(current, reference)
    return current >= reference if after else current <= reference


def date_after(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    return _compare_dates(value, options, params, after=True)


def date_before(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    return _compare_dates(value, options, params, after=False)


async def decimal(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    precision = options.get("precision")
    if precision:
        pattern = re.compile(r"^[-+]?[0-9]*\.[0-9]{%d}\Z" % int(precision))
    else:
        pattern = DECIMAL_PATTERN
    return await check_handler(str(value), Pattern(pattern), options, params)


def email(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    if not value or not isinstance(value, str):
        return False
    if len(value) > 254:
        return False
    if not EMAIL_PATTERN.match(value):
        return False
    local, domain = value.split("@", 1)
    if len(local) > 64:
        return False
    return all(len(label) <= 63 for label in domain.split("."))


def equal_to(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    key = options.get("key")
    data = options.get("data")
    if key is None or not isinstance(data, Mapping) or key not in data:
        return False
    return _loose_equals(value, data[key])


def in_list(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    items = options.get("list") or []
    if isinstance(value, bool) or value == "" or value is None:
        return any(type(item) is type(value) and item == value for item in items)
    return any(_loose_equals(item, value) for item in items)


def in_range(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    if not _is_number(value) or not math.isfinite(value):
        return False
    lower = _bound(options, "lower")
    upper = _bound(options, "upper")
    if lower is _INVALID or upper is _INVALID:
        return False
    if lower is not None and upper is not None:
        return lower <= value <= upper
    if upper is not None:
        return value <= upper
    if lower is not None:
        return value >= lower
    return not math.isinf(value)


def length(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    expected = _bound(options, "length")
    if expected is None or expected is _INVALID or not isinstance(value, str):
        return False
    return len(value) == expected


def length_between(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    low = _bound(options, "min")
    high = _bound(options, "max")
    if not isinstance(value, str) or any(b is None or b is _INVALID for b in (low, high)):
        return False
    return low <= len(value) <= high


def length_max(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    limit = _bound(options, "length")
    if limit is None or limit is _INVALID or not isinstance(value, str):
        return False
    return len(value) <= limit


def length_min(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    limit = _bound(options, "length")
    if limit is None or limit is _INVALID or not isinstance(value, str):
        return False
    return len(value) >= limit


def luhn(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    return luhn_valid(value)


def maximum(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    limit = _bound(options, "max")
    if limit is None or limit is _INVALID:
        return False
    number = _to_number(value)
    return number is not None and number <= limit


def minimum(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    limit = _bound(options, "min")
    if limit is None or limit is _INVALID:
        return False
    number = _to_number(value)
    return number is not None and number >= limit


def numeric(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    if _is_number(value):
        return math.isfinite(value)
    if isinstance(value, str):
        return NUMERIC_PREFIX_PATTERN.match(value) is not None
    return False


def regex(value: Any, options: dict[str, Any], params: dict[str, Any]) -> bool:
    return isinstance(value, re.Pattern)


# =============================================================================
# Format sets
# =============================================================================

CREDIT_CARD_FORMATS = FormatSet(
    {name: Pattern(pattern) for name, pattern in CREDIT_CARD_PATTERNS.items()}
)

IP_FORMATS = FormatSet({"ipv4": Pattern(IPV4_PATTERN), "ipv6": Pattern(IPV6_PATTERN)})

MONEY_FORMATS = FormatSet({name: Pattern(pattern) for name, pattern in MONEY_PATTERNS.items()})


# =============================================================================
# Registration
# =============================================================================


def builtin_handlers() -> dict[str, HandlerDefinition]:
    """Return a fresh mapping of the built-in handler definitions."""
    return {
        "accepted": Predicate(accepted),
        "alphaNumeric": Predicate(alpha_numeric),
        "boolean": Predicate(boolean),
        "creditCard": Predicate(credit_card),
        "date": Predicate(is_date),
        "dateAfter": Predicate(date_after),
        "dateBefore": Predicate(date_before),
        "decimal": Predicate(decimal),
        "email": Predicate(email),
        "empty": Pattern(EMPTY_PATTERN),
        "equalTo": Predicate(equal_to),
        "inList": Predicate(in_list),
        "inRange": Predicate(in_range),
        "integer": Pattern(INTEGER_PATTERN),
        "ip": IP_FORMATS,
        "length": Predicate(length),
        "lengthBetween": Predicate(length_between),
        "lengthMax": Predicate(length_max),
        "lengthMin": Predicate(length_min),
        "luhn": Predicate(luhn),
        "max": Predicate(maximum),
        "min": Predicate(minimum),
        "money": MONEY_FORMATS,
        "numeric": Predicate(numeric),
        "phone": Pattern(PHONE_PATTERN),
        "regex": Predicate(regex),
        "time": Pattern(TIME_PATTERN),
        "url": Pattern(URL_PATTERN),
        "uuid": Pattern(UUID_PATTERN),
    }
