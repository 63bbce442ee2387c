"""Built-in handlers for fieldrules.

This package provides the default handler and message catalogue that
``HandlerRegistry.reset()`` installs.
"""

from fieldrules.handlers.builtins import (
    BUILTIN_MESSAGES,
    CREDIT_CARD_FORMATS,
    IP_FORMATS,
    MONEY_FORMATS,
    builtin_handlers,
    luhn_valid,
    to_datetime,
)

__all__ = [
    "BUILTIN_MESSAGES",
    "CREDIT_CARD_FORMATS",
    "IP_FORMATS",
    "MONEY_FORMATS",
    "builtin_handlers",
    "luhn_valid",
    "to_datetime",
]
