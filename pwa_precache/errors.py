"""Exceptions raised by the precache builder.

Each carries the HTTP status the endpoint layer answers with.
"""


class PrecacheError(Exception):
    status_code = 500

    def __init__(self, message: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class MissingManifestData(PrecacheError):
    status_code = 400

    def __init__(self, message: str = "Missing manifest data") -> None:
        super().__init__(message)


class Unauthorized(PrecacheError):
    status_code = 401


class Forbidden(PrecacheError):
    status_code = 403


class AppNotFound(PrecacheError):
    status_code = 404


class InjectionError(PrecacheError):
    pass
