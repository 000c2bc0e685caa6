"""
Custom exception hierarchy for OmniVault.

Core vault operations are total and do not raise on odd input; these types
mark the boundaries that can fail (storage backends, configuration and the
generative-AI provider). All exceptions inherit from OmniVaultError.
"""


class OmniVaultError(Exception):
    """
    Base exception for all OmniVault errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize OmniVault error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class StoreError(OmniVaultError):
    """
    Base exception for store operations.
    Raised when the key-value backend fails to read or write.
    """

    pass


class PersistenceError(StoreError):
    """
    Persistence adapter errors.
    Raised when a vault snapshot cannot be written.
    """

    pass


class ValidationError(OmniVaultError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class NotFoundError(OmniVaultError):
    """
    Resource not found errors.
    Raised when a requested note doesn't exist.
    """

    pass


class ConfigurationError(OmniVaultError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class LLMError(OmniVaultError):
    """
    LLM operation errors.
    Raised when provider calls fail (API errors, timeouts, malformed responses)
    or when a provider does not support a capability.
    """

    pass
