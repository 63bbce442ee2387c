"""fieldrules: declarative validation of nested structured data.

Rules are declared per dotted field path (``*`` segments match every key or
index), checked by named handlers, and failures are collected as templated
messages keyed by the resolved field path.

Usage:
    from fieldrules import Validator

    validator = Validator()
    validator.rule("emails.*", "email")
    validator.rule("title", {"not:empty": "please enter a ${field}"})

    if not await validator.validates(data, events="create"):
        print(validator.errors())
"""

from fieldrules.checker import check_handler
from fieldrules.config import CliSettings, ValidatorConfig
from fieldrules.errors import ErrorCollector
from fieldrules.exceptions import (
    FieldRulesError,
    RuleDeclarationError,
    RuleFileError,
    UnknownHandlerError,
)
from fieldrules.loader import (
    RuleFileIssue,
    build_validator,
    lint_rules_file,
    load_rules_file,
)
from fieldrules.messages import MessageFormatter, interpolate
from fieldrules.paths import resolve_values
from fieldrules.registry import HandlerRegistry, default_registry
from fieldrules.rules import RuleSet, parse_rule_name
from fieldrules.types import (
    FormatSet,
    HandlerDefinition,
    Pattern,
    Predicate,
    RuleRecord,
    as_handler,
)
from fieldrules.validator import Validator

__all__ = [
    # Engine
    "Validator",
    "ValidatorConfig",
    "ErrorCollector",
    # Handlers
    "HandlerRegistry",
    "default_registry",
    "HandlerDefinition",
    "Predicate",
    "Pattern",
    "FormatSet",
    "as_handler",
    "check_handler",
    # Rules
    "RuleRecord",
    "RuleSet",
    "parse_rule_name",
    "resolve_values",
    # Messages
    "MessageFormatter",
    "interpolate",
    # Rule files
    "RuleFileIssue",
    "build_validator",
    "lint_rules_file",
    "load_rules_file",
    "CliSettings",
    # Errors
    "FieldRulesError",
    "UnknownHandlerError",
    "RuleDeclarationError",
    "RuleFileError",
]
