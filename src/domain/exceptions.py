"""
Domain exceptions - Semantic error types for account activation.

Every expected, caller-recoverable outcome of the activation workflow is
an ActivationError subclass. RegistryInvariantError is deliberately kept
outside that hierarchy: it signals an implementation bug, not bad input.
"""


class ActivationError(Exception):
    """Base class for activation domain errors."""

    pass


class InvalidIdentity(ActivationError):
    """Identity does not have an email shape."""

    pass


class InvalidCode(ActivationError):
    """Code is not exactly six decimal digits."""

    pass


class ActivationNotFound(ActivationError):
    """No record exists for the identity or token."""

    pass


class ActivationExpired(ActivationError):
    """Record exists but its token/code pair is past its deadline."""

    pass


class CodeMismatch(ActivationError):
    """Record is pending and unexpired but the code does not match."""

    pass


class RegistryInvariantError(RuntimeError):
    """The registry detected a state that should be impossible."""

    pass
