"""
Domain Errors
-------------
Raised by services and CRUD helpers; the API layer and the planner
orchestrator translate them into user-facing messages.
"""


class FitPlanError(Exception):
    """Base class for all planner errors."""


class EmailAlreadyInUseError(FitPlanError):
    def __init__(self, message: str = "Email already in use."):
        super().__init__(message)


class PasswordHashingError(FitPlanError):
    def __init__(self, message: str = "Failed to secure password."):
        super().__init__(message)


class TokenExpiredError(FitPlanError):
    pass


class InvalidTokenError(FitPlanError):
    pass


class ConfigurationError(FitPlanError):
    """A required setting (secret, price id, API key) is missing."""


class ClientNotInitializedError(FitPlanError):
    def __init__(self, message: str = "AI client not initialized. Please set your API Key in the app settings."):
        super().__init__(message)


class GenerationTransportError(FitPlanError):
    """The model call itself failed (network, HTTP, provider error)."""


class AuthServiceError(FitPlanError):
    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code
