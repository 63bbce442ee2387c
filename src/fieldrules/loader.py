"""
loader.py: rule files for fieldrules.

A rule file is a YAML (or JSON) document with a ``rules`` mapping of field
path to declarations, plus optional ``handlers``, ``messages`` and ``meta``
sections:

    meta: {model: Post}
    handlers:
      zipCode: "/^[0-9]{5}$/"
    messages:
      required: "must be provided"
    rules:
      title:
        - not:empty: please enter a ${field}
        - lengthBetween: {min: 1, max: 7}
      emails.*: email

Usage:
    from fieldrules.loader import build_validator, lint_rules_file

    validator = build_validator(Path("rules/post.yaml"))
    issues = lint_rules_file(Path("rules/post.yaml"), strict=True)

PyYAML quirk: the bare key ``on:`` is parsed as boolean ``True``, not the string
``"on"``. Loaded documents are preprocessed to rename that key.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from fieldrules.config import ValidatorConfig
from fieldrules.exceptions import FieldRulesError, RuleFileError
from fieldrules.registry import HandlerRegistry, default_registry
from fieldrules.rules import normalize
from fieldrules.validator import Validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------

_SCHEMAS_DIR = Path(__file__).parent / "schemas"
_RULES_SCHEMA = "rules.schema.json"

JSON_SUFFIXES = (".json",)


@dataclass
class RuleFileIssue:
    """A single finding for a rule file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "rules/title[0]"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema(name: str = _RULES_SCHEMA) -> dict[str, Any]:
    schema_path = _SCHEMAS_DIR / name
    with schema_path.open() as fh:
        return json.load(fh)


def _preprocess_on_key(obj: Any) -> Any:
    """
    Recursively rename the boolean key ``True`` → ``"on"`` in a parsed YAML dict.

    PyYAML parses the bare key ``on:`` as boolean ``True`` (YAML 1.1 booleans),
    while rule options use the string key ``"on"``.
    """
    if isinstance(obj, dict):
        result: dict[Any, Any] = {}
        for k, v in obj.items():
            new_key = "on" if k is True else k
            result[new_key] = _preprocess_on_key(v)
        return result
    if isinstance(obj, list):
        return [_preprocess_on_key(item) for item in obj]
    return obj


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _parse(path: Path) -> Any:
    """Parse a JSON or YAML file, raising RuleFileError when unreadable."""
    try:
        with path.open() as fh:
            if path.suffix.lower() in JSON_SUFFIXES:
                return json.load(fh)
            return yaml.safe_load(fh)
    except OSError as exc:
        raise RuleFileError(f"Cannot read {path}: {exc}") from exc
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        raise RuleFileError(f"Cannot parse {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_data_file(path: Path) -> Any:
    """Load a JSON or YAML data document."""
    return _parse(path)


def load_rules_file(path: Path) -> dict[str, Any]:
    """
    Load a rule file into a plain dict.

    Raises:
        RuleFileError: If the file cannot be read or is not a mapping with a
            ``rules`` mapping.
    """
    raw = _parse(path)
    if raw is None:
        raise RuleFileError(f"{path} is empty")
    if not isinstance(raw, Mapping):
        raise RuleFileError(f"{path} must contain a mapping, got {type(raw).__name__}")

    doc = _preprocess_on_key(raw)
    rules = doc.get("rules")
    if not isinstance(rules, Mapping):
        raise RuleFileError(f"{path} must define a 'rules' mapping")
    for section in ("handlers", "messages", "meta"):
        if doc.get(section) is not None and not isinstance(doc[section], Mapping):
            raise RuleFileError(f"'{section}' in {path} must be a mapping")
    return doc


def build_validator(path: Path, registry: HandlerRegistry | None = None) -> Validator:
    """
    Build a Validator from a rule file.

    Args:
        path:     Rule file (YAML or JSON).
        registry: Registry handle for the validator; the shared default if omitted.

    Raises:
        RuleFileError: If the file cannot be loaded or declares invalid rules.
    """
    doc = load_rules_file(path)
    config = ValidatorConfig(
        handlers=dict(doc.get("handlers") or {}),
        meta=dict(doc.get("meta") or {}),
        messages={str(k): str(v) for k, v in (doc.get("messages") or {}).items()},
    )
    try:
        validator = Validator(config, registry=registry)
        for field, declarations in doc["rules"].items():
            validator.rule(str(field), declarations)
    except FieldRulesError as exc:
        raise RuleFileError(f"Invalid rules in {path}: {exc}") from exc
    logger.debug("Built validator from %s for fields %s", path, validator.rules.fields())
    return validator


def lint_rules_file(
    path: Path,
    *,
    strict: bool = False,
    registry: HandlerRegistry | None = None,
) -> list[RuleFileIssue]:
    """
    Check a rule file against the JSON Schema and the known handlers.

    Unknown handler names are reported as warnings; ``strict`` escalates
    them to errors.

    Returns:
        A list of :class:`RuleFileIssue` objects (empty on success).
    """
    if registry is None:
        registry = default_registry

    # 1. Parse
    try:
        raw = _parse(path)
    except RuleFileError as exc:
        return [RuleFileIssue(file=path, message=str(exc))]

    if raw is None:
        return [RuleFileIssue(file=path, message="File is empty or contains only whitespace")]

    # 2. Pre-process PyYAML quirks
    doc = _preprocess_on_key(raw)

    # 3. Schema validation
    validator = Draft202012Validator(_load_schema())
    issues = [
        RuleFileIssue(file=path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=_json_path)
    ]
    if issues:
        return issues

    # 4. Declarations and handler names
    local_handlers = set(doc.get("handlers") or {})
    for field, declarations in doc["rules"].items():
        try:
            records = normalize(str(field), declarations)
        except FieldRulesError as exc:
            issues.append(RuleFileIssue(file=path, message=str(exc), path=f"rules/{field}"))
            continue
        for record in records:
            if record.handler in local_handlers or registry.has(record.handler):
                continue
            issues.append(
                RuleFileIssue(
                    file=path,
                    message=f"Unknown handler '{record.handler}'",
                    path=f"rules/{field}",
                    severity="warning",
                )
            )

    if strict:
        for issue in issues:
            if issue.severity == "warning":
                issue.severity = "error"

    return issues
