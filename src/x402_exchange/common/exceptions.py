"""x402 Exchange exception hierarchy."""


class ExchangeError(Exception):
    """Base exception for all x402 Exchange errors."""

    status_code = 400

    def __init__(self, message: str = "", code: str = "EXCHANGE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidApiKeyError(ExchangeError):
    """Raised when an API key is unknown or inactive."""

    status_code = 401

    def __init__(self, message: str = "Invalid or inactive API key"):
        super().__init__(message, code="INVALID_API_KEY")


class UnauthorizedError(ExchangeError):
    """Raised when a bearer token or login fails verification."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class WalletNotConfiguredError(ExchangeError):
    """Raised when a user has no wallet row."""

    status_code = 404

    def __init__(self, message: str = "No wallet configured for user"):
        super().__init__(message, code="NO_WALLET")


class EndpointNotFoundError(ExchangeError):
    status_code = 404

    def __init__(self, message: str = "Endpoint not found"):
        super().__init__(message, code="NOT_FOUND")


class DuplicateAccountError(ExchangeError):
    status_code = 409

    def __init__(self, message: str = "An account with this email already exists"):
        super().__init__(message, code="DUPLICATE_ACCOUNT")


class ConfigurationValidationError(ExchangeError):
    """Raised when wallet or endpoint form input is rejected."""

    status_code = 422

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message, code="VALIDATION_ERROR")
