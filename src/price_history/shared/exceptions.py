"""Error taxonomy for price recording and reporting."""


class PriceHistoryError(Exception):
    """Base class for all price-history errors."""


class FetchFailure(PriceHistoryError):
    """The price source was unreachable or returned an unusable payload."""


class InvalidPrice(PriceHistoryError, ValueError):
    """A price was missing, non-numeric, non-finite or negative."""


class StoreUnavailable(PriceHistoryError):
    """The price store could not be opened or created."""


class InvalidArguments(PriceHistoryError):
    """The command line named no subcommand or an unknown one."""
