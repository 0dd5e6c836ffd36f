"""Error taxonomy shared by the service layer and the HTTP handlers."""


class DriveError(Exception):
    status_code = 500

    def __init__(self, message: str = "Something went wrong"):
        self.message = message
        super().__init__(message)


class AuthenticationError(DriveError):
    """Missing, malformed or expired bearer token, or bad credentials."""

    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class NotFoundError(DriveError):
    """Entity is absent, or belongs to somebody else.

    The two cases are reported identically so that a caller can never probe
    for ids owned by other users.
    """

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class ValidationError(DriveError):
    status_code = 400


class ConflictError(DriveError):
    status_code = 409
