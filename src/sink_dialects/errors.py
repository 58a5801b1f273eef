"""Exception hierarchy for the dialect layer."""


class DialectError(Exception):
    """Base class for all dialect layer errors."""


class UnsupportedTypeError(DialectError):
    """A schema type has no SQL mapping or binder in the dialect."""


class BindFailure(DialectError):
    """A value could not be bound into a prepared parameter slot.

    The underlying error, if any, is chained as ``__cause__``.
    """


class NoDialectMatchError(DialectError, LookupError):
    """No registered dialect handles the connection URL's subprotocol."""


class DialectConfigurationError(DialectError, ValueError):
    """A dialect, registry, or statement request is misconfigured."""


__all__ = [
    "DialectError",
    "UnsupportedTypeError",
    "BindFailure",
    "NoDialectMatchError",
    "DialectConfigurationError",
]
