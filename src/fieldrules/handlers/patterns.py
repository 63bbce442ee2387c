"""Regular expressions used by the built-in handlers.

End anchors are ``\\Z`` rather than ``$`` so a trailing newline never matches.
"""

import re

# Letters and digits from any script, nothing else
ALPHA_NUMERIC_PATTERN = re.compile(r"^[^\W_]+\Z")

EMPTY_PATTERN = re.compile(r"^\s*\Z")

INTEGER_PATTERN = re.compile(r"^(?:[-+]?(?:0|[1-9][0-9]*))\Z")

DECIMAL_PATTERN = re.compile(r"^[-+]?([0-9]+|[0-9]*\.[0-9]+(?:e[0-9]+)?)\Z")

EMAIL_PATTERN = re.compile(
    r"^[-!#$%&'*+/0-9=?A-Z^_a-z{|}~](\.?[-!#$%&'*+/0-9=?A-Z^_a-z`{|}~])*"
    r"@[a-zA-Z0-9](-?\.?[a-zA-Z0-9])*(\.[a-zA-Z](-?[a-zA-Z0-9])*)+\Z"
)

PHONE_PATTERN = re.compile(r"^\+?[0-9()\-]{10,20}\Z")

TIME_PATTERN = re.compile(
    r"^((0?[1-9]|1[012])(:[0-5]\d){0,2}([AP]M|[ap]m))|^([01]\d|2[0-3])(:[0-5]\d){0,2}\Z"
)

URL_PATTERN = re.compile(r"^(?:\w+:)?//([^\s.]+\.\S{2}|localhost[:?\d]*)\S*\Z")

UUID_PATTERN = re.compile(
    r"^[A-Fa-f0-9]{8}-[A-Fa-f0-9]{4}-[A-Fa-f0-9]{4}-[A-Fa-f0-9]{4}-[A-Fa-f0-9]{12}\Z"
)

# Leading numeric prefix of a string, as a lenient float parse would read it
NUMERIC_PREFIX_PATTERN = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

IPV4_PATTERN = re.compile(
    r"^(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\."
    r"(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\Z"
)

IPV6_PATTERN = re.compile(
    r"^(?:"
    r"([0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}"
    r"|([0-9a-fA-F]{1,4}:){1,7}:"
    r"|([0-9a-fA-F]{1,4}:){1,6}:[0-9a-fA-F]{1,4}"
    r"|([0-9a-fA-F]{1,4}:){1,5}(:[0-9a-fA-F]{1,4}){1,2}"
    r"|([0-9a-fA-F]{1,4}:){1,4}(:[0-9a-fA-F]{1,4}){1,3}"
    r"|([0-9a-fA-F]{1,4}:){1,3}(:[0-9a-fA-F]{1,4}){1,4}"
    r"|([0-9a-fA-F]{1,4}:){1,2}(:[0-9a-fA-F]{1,4}){1,5}"
    r"|[0-9a-fA-F]{1,4}:((:[0-9a-fA-F]{1,4}){1,6})"
    r"|:((:[0-9a-fA-F]{1,4}){1,7}|:)"
    r"|fe80:(:[0-9a-fA-F]{0,4}){0,4}%[0-9a-zA-Z]+"
    r"|::(ffff(:0{1,4})?:)?((25[0-5]|(2[0-4]|1?[0-9])?[0-9])\.){3}(25[0-5]|(2[0-4]|1?[0-9])?[0-9])"
    r"|([0-9a-fA-F]{1,4}:){1,4}:((25[0-5]|(2[0-4]|1?[0-9])?[0-9])\.){3}(25[0-5]|(2[0-4]|1?[0-9])?[0-9])"
    r")\Z"
)

CREDIT_CARD_PATTERNS: dict[str, re.Pattern[str]] = {
    "amex": re.compile(r"^3[4|7]\d{13}\Z"),
    "bankcard": re.compile(r"^56(10\d\d|022[1-5])\d{10}\Z"),
    "diners": re.compile(r"^(?:3(0[0-5]|[68]\d)\d{11})|(?:5[1-5]\d{14})\Z"),
    "disc": re.compile(r"^(?:6011|650\d)\d{12}\Z"),
    "electron": re.compile(r"^(?:417500|4917\d{2}|4913\d{2})\d{10}\Z"),
    "enroute": re.compile(r"^2(?:014|149)\d{11}\Z"),
    "jcb": re.compile(r"^(3\d{4}|2100|1800)\d{11}\Z"),
    "maestro": re.compile(r"^(?:5020|6\d{3})\d{12}\Z"),
    "mc": re.compile(r"^5[1-5]\d{14}\Z"),
    "solo": re.compile(r"^(6334[5-9][0-9]|6767[0-9]{2})\d{10}(\d{2,3})?\Z"),
    "switch": re.compile(
        r"^(?:49(03(0[2-9]|3[5-9])|11(0[1-2]|7[4-9]|8[1-2])|36[0-9]{2})\d{10}(\d{2,3})?)"
        r"|(?:564182\d{10}(\d{2,3})?)|(6(3(33[0-4][0-9])|759[0-9]{2})\d{10}(\d{2,3})?)\Z"
    ),
    "visa": re.compile(r"^4\d{12}(\d{3})?\Z"),
    "voyager": re.compile(r"^8699[0-9]{11}\Z"),
    "fast": re.compile(
        r"^(?:4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|6011[0-9]{12}"
        r"|3(?:0[0-5]|[68][0-9])[0-9]{11}|3[47][0-9]{13})\Z"
    ),
}

_CURRENCY_SYMBOLS = (
    "\\x24\\xA2-\\xA5\\u058F\\u060B\\u09F2\\u09F3\\u09FB\\u0AF1\\u0BF9\\u0E3F\\u17DB"
    "\\u20A0-\\u20BE\\uA838\\uFDFC\\uFE69\\uFF04\\uFFE0\\uFFE1\\uFFE5\\uFFE6"
)

_AMOUNT = r"(?!0,?\d)(?:\d{1,3}(?:([, .])\d{3})?(?:\1\d{3})*|(?:\d+))([,.]\d{2})?"

MONEY_PATTERNS: dict[str, re.Pattern[str]] = {
    "right": re.compile(r"^" + _AMOUNT + r"(?!¢)[" + _CURRENCY_SYMBOLS + r"]?\Z"),
    "left": re.compile(r"^(?!¢)[" + _CURRENCY_SYMBOLS + r"]?" + _AMOUNT + r"\Z"),
}
