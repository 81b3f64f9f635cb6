"""Error types raised and handled across mailgate."""


class MailgateError(Exception):
    """Base class for every mailgate error."""


class ConfigurationError(MailgateError):
    """Invalid configuration, raised at construction time only."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class TransportError(MailgateError):
    """A provider request failed before a usable response arrived."""


class CacheError(MailgateError):
    """The verdict cache could not be read or written."""


class MalformedResponseError(MailgateError):
    """A provider answered with a body that is not JSON."""
