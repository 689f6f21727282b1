# app/errors.py
import enum


class ErrorKind(str, enum.Enum):
    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_ENDPOINT = "INVALID_ENDPOINT"
    UNCAUGHT_ERROR = "UNCAUGHT_ERROR"
    QUERY_ERROR = "QUERY_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    DOESNT_EXIST_ERROR = "DOESNT_EXIST_ERROR"
    INVALID_PARAMETERS = "INVALID_PARAMETERS"


class AppError(Exception):
    """
    Error carrying an HTTP status and an error kind.

    Operational errors are safe to show to callers as-is. Non-operational
    ones wrap unexpected failures and are flattened in production.
    """

    def __init__(self, message: str, kind: ErrorKind, status_code: int, is_operational: bool = True):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.is_operational = is_operational

    @property
    def name(self) -> str:
        return self.kind.value

    def __repr__(self):
        return f"<AppError {self.kind.value} {self.status_code}: {self.message}>"


class ConfigurationError(AppError):
    """Raised when required server configuration (e.g. the JWT secret) is missing."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.UNCAUGHT_ERROR, 500, is_operational=False)


# -------------------- PRE DEFINED ERRORS --------------------

def MissingFieldsError(message: str) -> AppError:
    return AppError(message, ErrorKind.MISSING_FIELDS, 400)


def InvalidRequestError(message: str) -> AppError:
    return AppError(message, ErrorKind.INVALID_REQUEST, 400)


def InvalidEndpointError(message: str) -> AppError:
    return AppError(message, ErrorKind.INVALID_ENDPOINT, 404)


def UncaughtError(message: str, is_operational: bool = True) -> AppError:
    return AppError(message, ErrorKind.UNCAUGHT_ERROR, 500, is_operational=is_operational)


def QueryError(message: str, is_operational: bool = True) -> AppError:
    return AppError(message, ErrorKind.QUERY_ERROR, 500, is_operational=is_operational)


def AuthenticationError(message: str) -> AppError:
    return AppError(message, ErrorKind.AUTHENTICATION_ERROR, 401)


def DoesntExistError(message: str) -> AppError:
    return AppError(message, ErrorKind.DOESNT_EXIST_ERROR, 404)


def InvalidParametersError(message: str) -> AppError:
    return AppError(message, ErrorKind.INVALID_PARAMETERS, 400)
