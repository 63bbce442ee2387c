"""Exceptions raised by fieldrules.

Only configuration problems surface as exceptions. A value that fails a
check is never an exception: it is recorded in the validator's error map
and reported through the boolean result of ``Validator.validates()``.
"""


class FieldRulesError(Exception):
    """Base class for all fieldrules errors."""
    pass


class UnknownHandlerError(FieldRulesError, LookupError):
    """A rule references a handler that no registry defines."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unexisting `{name}` as validation handler.")


class RuleDeclarationError(FieldRulesError, ValueError):
    """A rule declaration or handler definition has an unsupported shape."""
    pass


class RuleFileError(FieldRulesError):
    """A rule file cannot be read or does not describe a rule set."""
    pass
