"""Custom exceptions for HomeFS application"""


class HomeFSError(Exception):
    """Base exception for HomeFS application"""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ConfigurationError(HomeFSError):
    """Configuration-related errors"""

    pass


class AccessDeniedError(HomeFSError):
    """Path escapes the home directory or the OS refused access"""

    status_code = 403


class ItemNotFoundError(HomeFSError):
    """Requested file or directory does not exist"""

    status_code = 404


class InvalidRequestError(HomeFSError):
    """Malformed request: empty upload, empty path, bad filename"""

    status_code = 400


class FileOperationError(HomeFSError):
    """File operation errors"""

    pass
