"""Tests for rule file loading and linting."""

import json
from pathlib import Path

import pytest

from fieldrules.exceptions import RuleFileError
from fieldrules.loader import build_validator, lint_rules_file, load_data_file, load_rules_file
from fieldrules.registry import HandlerRegistry

POST_RULES = """\
meta:
  model: Post
handlers:
  zipCode: "/^[0-9]{5}$/"
  code:
    short: "^[A-Z]{2}$"
    long: "^[A-Z]{4}$"
messages:
  zipCode: must be a zip code
rules:
  title:
    - not:empty: please enter a ${field}
    - lengthBetween: {min: 1, max: 7}
  emails.*: email
  zip: zipCode
  code:
    code:
      check: long
  slug:
    not:empty:
      on: create
"""


@pytest.fixture
def registry():
    return HandlerRegistry()


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    path = tmp_path / "post.yaml"
    path.write_text(POST_RULES)
    return path


def write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content)
    return path


class TestLoadRulesFile:
    def test_loads_sections(self, rules_file):
        doc = load_rules_file(rules_file)
        assert doc["meta"] == {"model": "Post"}
        assert list(doc["rules"]) == ["title", "emails.*", "zip", "code", "slug"]

    def test_renames_boolean_on_key(self, rules_file):
        doc = load_rules_file(rules_file)
        assert doc["rules"]["slug"] == {"not:empty": {"on": "create"}}

    def test_json_file(self, tmp_path):
        path = write(tmp_path, "rules.json", json.dumps({"rules": {"title": "not:empty"}}))
        assert load_rules_file(path) == {"rules": {"title": "not:empty"}}

    def test_missing_rules(self, tmp_path):
        path = write(tmp_path, "rules.yaml", "meta: {}\n")
        with pytest.raises(RuleFileError, match="rules"):
            load_rules_file(path)

    def test_empty_file(self, tmp_path):
        path = write(tmp_path, "rules.yaml", "")
        with pytest.raises(RuleFileError, match="empty"):
            load_rules_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = write(tmp_path, "rules.yaml", "- a\n- b\n")
        with pytest.raises(RuleFileError):
            load_rules_file(path)

    def test_parse_error(self, tmp_path):
        path = write(tmp_path, "rules.yaml", "rules: [unclosed\n")
        with pytest.raises(RuleFileError, match="Cannot parse"):
            load_rules_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleFileError, match="Cannot read"):
            load_rules_file(tmp_path / "missing.yaml")


class TestBuildValidator:
    @pytest.mark.asyncio
    async def test_valid_data(self, rules_file, registry):
        validator = build_validator(rules_file, registry=registry)
        data = {
            "title": "hello",
            "emails": ["willy@boy.com"],
            "zip": "12345",
            "code": "ABCD",
            "slug": "hello",
        }
        assert await validator.validates(data) is True
        assert validator.meta() == {"model": "Post"}
        assert validator.rules.fields() == ["title", "emails.*", "zip", "code", "slug"]

    @pytest.mark.asyncio
    async def test_invalid_data(self, rules_file, registry):
        validator = build_validator(rules_file, registry=registry)
        data = {
            "title": "",
            "emails": ["invalid"],
            "zip": "1234",
            "code": "AB",
            "slug": "",
        }
        assert await validator.validates(data, events="update") is False
        assert validator.errors() == {
            "title": ["please enter a title", "must be between 1 and 7 characters"],
            "emails.0": ["is not a valid email address"],
            "zip": ["must be a zip code"],
            "code": ["is invalid"],
        }

    def test_local_handlers_do_not_leak(self, rules_file, registry):
        build_validator(rules_file, registry=registry)
        assert not registry.has("zipCode")

    def test_invalid_declaration(self, tmp_path, registry):
        path = write(tmp_path, "rules.yaml", "rules:\n  title: 12\n")
        with pytest.raises(RuleFileError, match="Invalid rules"):
            build_validator(path, registry=registry)


class TestLintRulesFile:
    def test_valid_file(self, rules_file, registry):
        assert lint_rules_file(rules_file, registry=registry) == []

    def test_schema_errors(self, tmp_path, registry):
        path = write(tmp_path, "rules.yaml", "rules:\n  title: 12\nextra: true\n")
        issues = lint_rules_file(path, registry=registry)
        assert issues
        assert all(issue.severity == "error" for issue in issues)
        assert any(issue.path == "rules/title" for issue in issues)

    def test_missing_rules(self, tmp_path, registry):
        path = write(tmp_path, "rules.yaml", "meta: {}\n")
        issues = lint_rules_file(path, registry=registry)
        assert len(issues) == 1
        assert "rules" in issues[0].message

    def test_unknown_handler_is_a_warning(self, tmp_path, registry):
        path = write(tmp_path, "rules.yaml", "rules:\n  title:\n    - not:empty\n    - nope\n")
        issues = lint_rules_file(path, registry=registry)
        assert len(issues) == 1
        assert issues[0].severity == "warning"
        assert "nope" in issues[0].message
        assert issues[0].path == "rules/title"

    def test_strict_escalates_warnings(self, tmp_path, registry):
        path = write(tmp_path, "rules.yaml", "rules:\n  title: nope\n")
        issues = lint_rules_file(path, strict=True, registry=registry)
        assert [issue.severity for issue in issues] == ["error"]

    def test_parse_error(self, tmp_path, registry):
        path = write(tmp_path, "rules.yaml", "rules: [unclosed\n")
        issues = lint_rules_file(path, registry=registry)
        assert len(issues) == 1
        assert issues[0].severity == "error"

    def test_empty_file(self, tmp_path, registry):
        path = write(tmp_path, "rules.yaml", "")
        issues = lint_rules_file(path, registry=registry)
        assert "empty" in issues[0].message

    def test_issue_str(self, tmp_path, registry):
        path = write(tmp_path, "rules.yaml", "rules:\n  title: nope\n")
        issue = lint_rules_file(path, registry=registry)[0]
        assert str(issue) == f"[WARNING] {path} at rules/title: Unknown handler 'nope'"


class TestLoadDataFile:
    def test_yaml(self, tmp_path):
        path = write(tmp_path, "data.yaml", "title: hello\nemails: [a@a.com]\n")
        assert load_data_file(path) == {"title": "hello", "emails": ["a@a.com"]}

    def test_json(self, tmp_path):
        path = write(tmp_path, "data.json", '{"title": null}')
        assert load_data_file(path) == {"title": None}
