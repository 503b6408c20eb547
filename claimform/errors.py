"""Exception types for claim form generation."""


class ClaimFormError(Exception):
    """Base class for all claim form errors."""


class MissingInputError(ClaimFormError):
    """The blank form PDF could not be found. Raised before any work starts."""


class MissingCredentialError(ClaimFormError):
    """AI mode was requested without an API key for the selected provider."""


class UnknownRuleError(ClaimFormError, KeyError):
    """A mapping names a computed rule or random method that does not exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown rule"


class WidgetStateError(ClaimFormError, ValueError):
    """A logical value does not match any on-state of a choice field."""
