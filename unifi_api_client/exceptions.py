class UnifiControllerError(Exception):
    """Base exception for UnifiClient errors."""

    pass


class UnifiConnectionError(UnifiControllerError):
    """Raised when the controller cannot be reached (connect, TLS or timeout failure)."""

    pass


class UnifiAuthenticationError(UnifiControllerError):
    """Raised when authentication with the UniFi Controller fails."""

    pass


class UnifiLoginRequiredError(UnifiAuthenticationError):
    """Raised when a call needing a session is made before logging in."""

    pass


class UnifiLoginFailedError(UnifiAuthenticationError):
    """Raised when the controller rejects the login or returns no session cookie."""

    def __init__(self, message: str = "", status_code=None):
        super().__init__(message)
        self.status_code = status_code


class UnifiAPIError(UnifiControllerError):
    """Raised when the controller answers with an error envelope."""

    pass


class UnifiDataError(UnifiControllerError):
    """Raised when there is an error parsing data from the UniFi Controller."""

    pass


class UnifiConfigurationError(UnifiControllerError, ValueError):
    """Raised when the client is configured with invalid values."""

    pass


class InvalidBaseUrlError(UnifiConfigurationError):
    """Raised when the controller base URL is incomplete, invalid or ends with '/'."""

    pass


class InvalidSiteNameError(UnifiConfigurationError):
    """Raised when a short site name contains whitespace while debug mode is on."""

    pass


class MacAddressError(UnifiConfigurationError):
    """Raised when a MAC address is empty or malformed."""

    pass
