"""Errors raised by port implementations.

Use cases catch these at row and flow boundaries and turn them into
dismissable state rather than letting them reach the presentation layer.
"""


class PortError(RuntimeError):
    """Base error for failures reported by an external collaborator."""


class ApiRequestError(PortError):
    """Raised when a request to the dashboard API fails.

    Attributes:
        status_code: HTTP status when the server answered, else None.
        server_message: ``message`` field of the error body, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message

    @property
    def user_message(self) -> str:
        """Return the message to show to the user."""
        return self.server_message or str(self)


class PdfDownloadError(PortError):
    """Raised when a PDF payload cannot be fetched byte-exact."""


__all__ = ["PortError", "ApiRequestError", "PdfDownloadError"]
