"""
Exceptions raised by the validator.

Problems found in a document are never raised: they are reported as
``ValidationError`` diagnostics. Exceptions are reserved for programmer
errors (a rule that breaks its contract) and for collaborators that cannot
supply a definition, which the driver turns into permissive validation.
"""

from __future__ import annotations


class OAValidatorError(Exception):
    """Base class for all package exceptions."""


class RuleNotImplementedError(OAValidatorError, NotImplementedError):
    """A targeted rule did not override the visit method it needs."""


class DefinitionNotFoundError(OAValidatorError, LookupError):
    """A loader could not supply a requested definition."""


class ModelNotFoundError(DefinitionNotFoundError):
    """No model definition exists for the requested name and version."""

    def __init__(self, name: str, version: str):
        super().__init__(f"Could not load definition for model {name!r} (version {version!r})")
        self.name = name
        self.version = version


class StandardNotFoundError(DefinitionNotFoundError):
    """No standard definition exists for the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Could not load definition for standard {name!r}")
        self.name = name
