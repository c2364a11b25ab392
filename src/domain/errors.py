"""Domain errors."""


class ReceiptValidationError(ValueError):
    """Raised when a payment receipt fails client-side validation.

    The message is user-facing and shown inline next to the capture form.
    """


__all__ = ["ReceiptValidationError"]
