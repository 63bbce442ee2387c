"""Validation engine.

A ``Validator`` owns a rule set, its local handler and message overrides, a
meta bag and an error renderer. Lookups check the local overrides first and
fall back to the registry handle it was built with; the registry itself is
never written to.

Example:
    validator = Validator()
    validator.rule("title", [
        {"not:empty": {"message": "please enter a ${field}"}},
        {"lengthBetween": {"min": 1, "max": 7}},
    ])

    await validator.validates({"title": ""})  # False
    validator.errors()
    # {"title": ["please enter a title", "must be between 1 and 7 characters"]}

A validator is not safe for concurrent ``validates()`` calls; callers must
serialize them.
"""

import logging
from collections.abc import Mapping
from typing import Any

from fieldrules.config import ValidatorConfig
from fieldrules.errors import ErrorCollector
from fieldrules.exceptions import UnknownHandlerError
from fieldrules.messages import DEFAULT_KEY, REQUIRED, ErrorRenderer, interpolate
from fieldrules.paths import resolve_values
from fieldrules.registry import HandlerRegistry, default_registry
from fieldrules.rules import RuleSet, parse_rule_name
from fieldrules.types import HandlerDefinition, RuleRecord, as_handler

logger = logging.getLogger(__name__)


def _as_events(events: str | list[str] | tuple[str, ...] | None) -> list[str]:
    if not events:
        return []
    if isinstance(events, str):
        return [events]
    return list(events)


class Validator:
    """Validates nested data against per-field rules."""

    def __init__(
        self,
        config: ValidatorConfig | Mapping[str, Any] | None = None,
        registry: HandlerRegistry | None = None,
    ):
        if config is None:
            config = ValidatorConfig()
        elif not isinstance(config, ValidatorConfig):
            config = ValidatorConfig.from_dict(config)

        self.registry = registry if registry is not None else default_registry
        self._handlers: dict[str, HandlerDefinition] = {}
        self._messages: dict[str, str] = {}
        self._meta: dict[str, Any] = {}
        self._error: ErrorRenderer = self._render_error
        self._rules = RuleSet()
        self._errors = ErrorCollector()

        self.set(config.handlers)
        self.messages(config.messages)
        self.meta(config.meta)
        if config.error is not None:
            self.error(config.error)

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def set(self, name: str | Mapping[str, Any], handler: Any = None) -> None:
        """Set one local handler, or several from a mapping.

        Local handlers shadow registry handlers of the same name for this
        validator only.
        """
        if isinstance(name, Mapping):
            entries = dict(name)
        else:
            entries = {name: handler}
        for key, definition in entries.items():
            self._handlers[key] = as_handler(definition)

    def has(self, name: str) -> bool:
        return name in self._handlers or self.registry.has(name)

    def get(self, name: str) -> HandlerDefinition:
        """Resolve a handler, local definitions first.

        Raises:
            UnknownHandlerError: If neither this validator nor its registry
                defines the handler
        """
        if name in self._handlers:
            return self._handlers[name]
        if self.registry.has(name):
            return self.registry.get(name)
        raise UnknownHandlerError(name)

    def handlers(
        self,
        handlers: Mapping[str, Any] | None = None,
        append: bool = True,
    ) -> dict[str, HandlerDefinition]:
        """Get, append or replace the local handlers.

        Returns:
            Registry handlers merged with the local ones (local wins)
        """
        if handlers is not None:
            coerced = {name: as_handler(definition) for name, definition in handlers.items()}
            if append:
                self._handlers.update(coerced)
            else:
                self._handlers = coerced
        return {**self.registry.handlers(), **self._handlers}

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def rule(self, field: str, declarations: Any) -> list[RuleRecord]:
        """Declare one or more rules for a field path.

        Repeated declarations for the same field append, keeping their
        order.
        """
        return self._rules.add(field, declarations)

    @property
    def rules(self) -> RuleSet:
        return self._rules

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    async def validates(
        self,
        data: Any,
        events: str | list[str] | None = None,
        **options: Any,
    ) -> bool:
        """Validate data against every declared rule.

        Args:
            data: The data tree to validate
            events: Active event tags; rules limited with ``on`` run only
                when one of their events is active
            **options: Extra options merged under every rule's own options

        Returns:
            True if no rule failed. Errors from the run are available from
            ``errors()``; those of any previous run are discarded.
        """
        active = _as_events(events)
        self._errors.clear()
        required_reported: set[str] = set()
        success = True

        for field, records in self._rules.items():
            for record in records:
                if not record.applies_to(active):
                    logger.debug(
                        "Skipping rule '%s' on '%s' for events %s", record.name, field, active
                    )
                    continue

                values = resolve_values(data, field)

                if not values:
                    if not record.required:
                        continue
                    success = False
                    if field not in required_reported:
                        logger.debug("Required field '%s' is missing", field)
                        required_reported.add(field)
                        bag = {**options, **record.to_options(), "message": None}
                        self._errors.add(field, self._error(REQUIRED, bag, self._meta))
                    continue

                for key, value in values.items():
                    if value is None and record.skip_null:
                        continue
                    if not value and record.skip_empty:
                        continue

                    bag = {**options, **record.to_options(), "data": data}
                    params: dict[str, Any] = {}
                    if not await self._check(record, value, bag, params):
                        success = False
                        self._errors.add(key, self._error(record.name, {**bag, **params}, self._meta))

        return success

    async def _check(
        self,
        record: RuleRecord,
        value: Any,
        options: dict[str, Any],
        params: dict[str, Any],
    ) -> bool:
        handler = self.get(record.handler)
        result = await self.registry.check(value, handler, options, params)
        return result != record.negated

    def errors(self) -> dict[str, list[str]]:
        """Errors of the last ``validates()`` run, by resolved field key."""
        return self._errors.to_dict()

    async def is_valid(
        self,
        name: str,
        value: Any,
        options: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> bool:
        """Check a single value against a handler name (``not:`` inverts)."""
        handler_name, negated = parse_rule_name(name)
        handler = self.get(handler_name)
        result = await self.registry.check(value, handler, options, params)
        return result != negated

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def message(self, name: str, message: str | None = None) -> str:
        """Get or set the message template for a rule name."""
        if message is not None:
            self._messages[name] = message
            return message
        if name in self._messages:
            return self._messages[name]
        return self.registry.message(name)

    def messages(
        self,
        messages: Mapping[str, str] | None = None,
        append: bool = True,
    ) -> dict[str, str]:
        """Get, append or replace the local messages.

        Returns:
            Registry messages merged with the local ones (local wins)
        """
        if messages is not None:
            if append:
                self._messages.update(messages)
            else:
                self._messages = dict(messages)
        merged = {**self.registry.messages(), **self._messages}
        merged.setdefault(DEFAULT_KEY, self.registry.message(DEFAULT_KEY))
        return merged

    def error(self, handler: ErrorRenderer | None = None) -> ErrorRenderer:
        """Get or set the error renderer ``(name, options, meta) -> str``."""
        if handler is not None:
            self._error = handler
        return self._error

    def meta(self, meta: dict[str, Any] | None = None) -> dict[str, Any]:
        """Get or set the meta bag passed to the error renderer."""
        if meta is not None:
            self._meta = meta
        return self._meta

    def _render_error(self, name: str, options: dict[str, Any], meta: dict[str, Any]) -> str:
        template = options.get("message") or self.message(name)
        return interpolate(template, options)
