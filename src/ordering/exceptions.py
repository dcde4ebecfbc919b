"""Error taxonomy for the ordering context.

All errors carry Protean-style message dictionaries (``{field: [messages]}``)
in ``messages`` so they render and map to HTTP responses the same way as
Protean's own ``ValidationError``.
"""

from protean.exceptions import ObjectNotFoundError, ProteanException, ValidationError


class NotFoundError(ObjectNotFoundError):
    """A product, artwork, artist, order or cart line does not exist."""

    def __init__(self, kind: str, identifier, detail: str | None = None) -> None:
        message = detail or f"{kind.capitalize()} {identifier} not found"
        super().__init__({kind: [message]})
        self.messages = {kind: [message]}
        self.kind = kind
        self.identifier = identifier


class InvalidTransitionError(ValidationError):
    """An order status change was attempted from a state that does not allow it."""

    def __init__(self, message: str) -> None:
        super().__init__({"status": [message]})


class PaymentError(ProteanException):
    """The payment provider rejected or failed an operation."""

    def __init__(self, message: str) -> None:
        super().__init__({"payment": [message]})
        self.messages = {"payment": [message]}
