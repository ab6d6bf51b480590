class PrintShopError(Exception):
    """Base class for errors raised by the shop engines."""


class ValidationError(PrintShopError):
    """A required field is missing or an operation is not allowed in the current state.

    The operation has had no effect.
    """


class NotFound(PrintShopError):
    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class CorruptState(PrintShopError):
    """A durable record could not be restored into the expected shape."""


class ExternalUnavailable(PrintShopError):
    """An external collaborator is unconfigured or unreachable."""
