"""Configuration errors for the auth starter service."""

from typing import Iterable, List, Optional

# Environment variables the service reads, in the order .env.example lists them
ENV_VARIABLES = (
    "MAIL_HOST",
    "MAIL_PORT",
    "MAIL_FROM",
    "MAIL_USER",
    "MAIL_PASSWORD",
    "MAIL_FROM_NAME",
    "DATABASE_URL",
    "AUTH_ENGINE",
    "AUTH_SECRET",
    "AUTH_BASE_URL",
    "APP_PORT",
    "LOG_LEVEL",
)

# Suggestions keyed by the variable they fix
ENV_SUGGESTIONS = {
    "MAIL_HOST": "Set MAIL_HOST to your SMTP relay hostname",
    "MAIL_PORT": "Set MAIL_PORT to 465 (implicit TLS), 587 (STARTTLS) or your relay's port",
    "MAIL_FROM": "Set MAIL_FROM to the sender address OTP and reset emails come from",
    "MAIL_USER": "Set both MAIL_USER and MAIL_PASSWORD, or neither for an unauthenticated relay",
    "MAIL_PASSWORD": "Set both MAIL_USER and MAIL_PASSWORD, or neither for an unauthenticated relay",
    "AUTH_ENGINE": "Set AUTH_ENGINE to 'package.module:factory', e.g. my_auth.engine:create_engine",
    "APP_PORT": "Set APP_PORT to a port between 1 and 65535",
    "LOG_LEVEL": "Set LOG_LEVEL to DEBUG, INFO, WARNING, ERROR or CRITICAL",
}


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded or validated.

    Collects every problem found in one pass so operators can fix them all
    at once. ``variables`` names the environment variables involved and is
    rendered as a "Check:" line so the offending entries in .env are easy
    to find.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
        variables: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.variables = variables or []
        super().__init__(self._format_message())

    @classmethod
    def from_environment(cls, errors: List[str]) -> "ConfigurationError":
        """Build the error for invalid environment variables.

        The variables named in ``errors`` select the suggestions, so an
        operator missing only AUTH_ENGINE is not told to fix MAIL_PORT.
        """
        variables = variables_in(errors)
        suggestions = []
        for name in variables:
            suggestion = ENV_SUGGESTIONS.get(name)
            if suggestion and suggestion not in suggestions:
                suggestions.append(suggestion)
        suggestions.append("Copy .env.example to .env and fill in your mail and engine settings")

        return cls(
            "Environment variable validation failed",
            errors=errors,
            suggestions=suggestions,
            variables=variables,
        )

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        if self.variables:
            parts.append(f"\nCheck: {', '.join(self.variables)}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"  - {suggestion}")

        return "\n".join(parts)


def variables_in(messages: Iterable[str]) -> List[str]:
    """Environment variable names mentioned in ``messages``, in ENV_VARIABLES order."""
    # Whole tokens only: MAIL_FROM must not match inside MAIL_FROM_NAME
    tokens = {
        token.strip(":.,")
        for message in messages
        for token in message.replace("'", " ").split()
    }
    return [name for name in ENV_VARIABLES if name in tokens]
