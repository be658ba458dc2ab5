"""Error taxonomy for the relay.

``InputValidationError`` subclasses are client mistakes (HTTP 400) and are
raised before anything touches the store. ``StoreUnavailableError`` wraps
every failure of the key-value store (HTTP 503) and is never conflated with
"nothing available".
"""


class OtpRelayError(Exception):
    pass


class ConfigError(OtpRelayError):
    """Fatal configuration problem detected at startup."""


class InputValidationError(OtpRelayError):
    pass


class MissingFieldError(InputValidationError):
    pass


class InvalidPhoneError(InputValidationError):
    def __init__(self, message: str = "Invalid phone number format"):
        super().__init__(message)


class OtpNotFoundError(InputValidationError):
    def __init__(self, message: str = "No valid OTP found in message (must be 4-8 digits)"):
        super().__init__(message)


class StoreUnavailableError(OtpRelayError):
    pass
