"""Custom exception classes for the PrismaLens image editor."""


class ImageEditAgentError(Exception):
    """Base exception for all editor errors."""
    pass


class ConfigurationError(ImageEditAgentError):
    """Configuration or initialization errors."""
    pass


class MalformedEncodingError(ImageEditAgentError):
    """Input does not parse as a valid encoded image."""

    user_message = "invalid image"


class EmptyPromptError(ImageEditAgentError):
    """Custom edit submitted with blank prompt text."""

    def __init__(self, message: str = "Please enter a prompt"):
        super().__init__(message)


class UnknownStyleError(ImageEditAgentError):
    """Style identifier has no catalog preset."""
    pass


class NoOriginalImageError(ImageEditAgentError):
    """Edit requested before any image was uploaded."""
    pass


class SessionNotFoundError(ImageEditAgentError):
    """No edit session registered under the given id."""
    pass


class ImageProcessingError(ImageEditAgentError):
    """Error processing image data."""
    pass


class APIError(ImageEditAgentError):
    """Base class for API-related errors."""
    pass


class ProviderRequestError(APIError):
    """Transport, auth or server failure talking to the image provider."""

    def __init__(self, provider: str, message: str, status_code: int = None):
        self.provider = provider
        self.status_code = status_code
        self.detail = message
        super().__init__(f"{provider} error: {message}")


class AuthenticationError(ProviderRequestError):
    """API authentication failed."""

    def __init__(self, provider: str, status_code: int = 401):
        super().__init__(provider, "Authentication failed", status_code)


class RateLimitError(ProviderRequestError):
    """API rate limit exceeded."""

    def __init__(self, provider: str, retry_after: int = None):
        self.retry_after = retry_after
        message = "Rate limit exceeded"
        if retry_after:
            message += f", retry after {retry_after}s"
        super().__init__(provider, message, 429)


class NoImageProducedError(APIError):
    """Provider accepted the request but returned no image content."""

    def __init__(
        self,
        message: str = (
            "The model processed the request but did not return an image. "
            "It might have refused the prompt."
        ),
    ):
        super().__init__(message)
