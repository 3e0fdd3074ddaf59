class WeatherError(Exception):
    """Base exception for weather provider errors."""
    pass

class WeatherNetworkError(WeatherError):
    """Raised when the weather provider cannot be reached."""
    pass

class WeatherServerError(WeatherError):
    """Raised when the weather provider answers with an error status."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"Weather provider returned status {status_code}")

class WeatherDecodingError(WeatherError):
    """Raised when a weather payload cannot be parsed."""
    pass

class InvalidLocation(Exception):
    """Coordinates rejected by a weather or tide provider."""
    pass

class InvalidLocationError(WeatherError, InvalidLocation):
    """Raised when coordinates are rejected by the weather provider."""
    pass

class TideError(Exception):
    """Base exception for tide provider errors."""
    pass

class TideNetworkError(TideError):
    pass

class TideServerError(TideError):
    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"Tide provider returned status {status_code}")

class NoTideDataError(TideError):
    """Raised when the provider has no extremes for the requested window."""
    pass

class TideUnknownError(TideError):
    """Raised for unexpected failures on the tide path."""
    pass

class InvalidTideLocationError(TideError, InvalidLocation):
    """Invalid coordinates reported by the tide provider."""
    pass
