"""Handler registry for fieldrules.

The registry is the shared capability provider: it maps handler names to
handler definitions and error messages. Validators hold an explicit
reference to one registry and shadow it with their own local handlers and
messages, without ever writing to it.

A process-wide instance, ``default_registry``, is created with the built-in
handlers. Tests and applications that need isolation create their own
``HandlerRegistry()`` and pass it to ``Validator(registry=...)``.
"""

import logging
from collections.abc import Mapping
from typing import Any

from fieldrules.checker import check_handler
from fieldrules.exceptions import UnknownHandlerError
from fieldrules.handlers import BUILTIN_MESSAGES, builtin_handlers
from fieldrules.messages import DEFAULT_KEY, DEFAULT_MESSAGE
from fieldrules.rules import parse_rule_name
from fieldrules.types import HandlerDefinition, as_handler

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Registry of named handlers and their default error messages.

    Example:
        registry = HandlerRegistry()
        registry.set("zeroToNine", re.compile(r"^[0-9]$"))

        await registry.is_valid("zeroToNine", "5")   # True
        await registry.is_valid("zeroToNine", "20")  # False
    """

    def __init__(self, builtins: bool = True):
        self._handlers: dict[str, HandlerDefinition] = {}
        self._messages: dict[str, str] = {}
        self.reset(totally=not builtins)

    def reset(self, totally: bool = False) -> None:
        """Reinitialize to the built-in handlers and messages.

        Args:
            totally: If True, leave the registry empty (only the default
                message remains)
        """
        self._handlers = {}
        self._messages = {DEFAULT_KEY: DEFAULT_MESSAGE}
        if totally:
            return
        self.messages(BUILTIN_MESSAGES)
        self.set(builtin_handlers())

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def set(self, name: str | Mapping[str, Any], handler: Any = None) -> None:
        """Register one handler, or several from a name -> definition mapping.

        Definitions may be callables, regexes, pattern strings, mappings of
        formats, or HandlerDefinition instances. Last write wins.
        """
        if isinstance(name, Mapping):
            entries = dict(name)
        else:
            entries = {name: handler}
        for key, definition in entries.items():
            if key in self._handlers:
                logger.debug("Overriding handler '%s'", key)
            self._handlers[key] = as_handler(definition)

    def has(self, name: str) -> bool:
        """Check if a handler is registered."""
        return name in self._handlers

    def get(self, name: str) -> HandlerDefinition:
        """Get a handler by name.

        Raises:
            UnknownHandlerError: If no handler has this name
        """
        if name not in self._handlers:
            raise UnknownHandlerError(name)
        return self._handlers[name]

    def handlers(
        self,
        handlers: Mapping[str, Any] | None = None,
        append: bool = True,
    ) -> dict[str, HandlerDefinition]:
        """Get, append or replace the registered handlers.

        Args:
            handlers: Handlers to register; None only reads
            append: Merge into the current handlers (True) or replace them

        Returns:
            Copy of the registered handlers
        """
        if handlers is not None:
            coerced = {name: as_handler(definition) for name, definition in handlers.items()}
            if append:
                self._handlers.update(coerced)
            else:
                self._handlers = coerced
        return dict(self._handlers)

    def list_registered(self) -> list[str]:
        """List all registered handler names."""
        return sorted(self._handlers)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def message(self, name: str, message: str | None = None) -> str:
        """Get or set the message for a rule name (``not:`` names included).

        Unknown names fall back to the ``_default_`` message.
        """
        if message is not None:
            self._messages[name] = message
            return message
        if name in self._messages:
            return self._messages[name]
        return self._messages.get(DEFAULT_KEY, DEFAULT_MESSAGE)

    def messages(
        self,
        messages: Mapping[str, str] | None = None,
        append: bool = True,
    ) -> dict[str, str]:
        """Get, append or replace messages; the result always has ``_default_``."""
        if messages is not None:
            if append:
                self._messages.update(messages)
            else:
                self._messages = dict(messages)
        return {DEFAULT_KEY: DEFAULT_MESSAGE, **self._messages}

    # -------------------------------------------------------------------------
    # Checking
    # -------------------------------------------------------------------------

    async def check(
        self,
        value: Any,
        handler: HandlerDefinition,
        options: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> bool:
        """Run a handler definition against a value."""
        return await check_handler(value, handler, options, params)

    async def is_valid(
        self,
        name: str,
        value: Any,
        options: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> bool:
        """Check a value against a named handler (``not:`` prefix inverts)."""
        handler_name, negated = parse_rule_name(name)
        handler = self.get(handler_name)
        result = await self.check(value, handler, options, params)
        return result != negated


default_registry = HandlerRegistry()
