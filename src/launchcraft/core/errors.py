"""Error taxonomy for validation, generation and accounts."""

from dataclasses import dataclass
from typing import Optional


class LaunchCraftError(Exception):
    """Base class for all LaunchCraft errors."""

    pass


@dataclass(frozen=True)
class FieldError:
    """One field-level validation failure."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class ProjectValidationError(LaunchCraftError):
    """Raised when a project description fails validation. User-correctable."""

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        summary = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Invalid project description: {summary}")

    @property
    def fields(self) -> set[str]:
        """Top-level field names that failed."""
        return {e.field.split(".")[0].split("[")[0] for e in self.errors}


class GenerationError(LaunchCraftError):
    """Base class for failures of the generation pipeline."""

    kind = "generation_error"
    user_message = "generation failed"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.user_message,
            "message": self.message,
            "code": self.status_code,
            "kind": self.kind,
        }


class ConfigurationError(GenerationError):
    """No usable provider credential or provider setting. A deployment defect."""

    kind = "configuration_error"
    user_message = "provider not configured"

    def to_dict(self) -> dict:
        return {"error": self.user_message, "kind": self.kind}


class EmptyResponseError(GenerationError):
    """The provider answered without any content."""

    kind = "empty_response"
    user_message = "no valid response received"


class SchemaMismatchError(GenerationError):
    """The provider payload is not JSON or does not match the response shape."""

    kind = "schema_mismatch"


class ProviderError(GenerationError):
    """The provider reported a failure (rate limit, auth, server error, network)."""

    kind = "provider_error"

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.provider_status = status_code
        self.status_code = status_code or 500

    @property
    def retryable(self) -> bool:
        """429, 5xx and connection failures may succeed on a later attempt."""
        if self.provider_status is None:
            return True
        return self.provider_status == 429 or self.provider_status >= 500

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["retryable"] = self.retryable
        return data


class DuplicateEmailError(LaunchCraftError):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")
