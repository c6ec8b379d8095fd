"""Error taxonomy shared by the settlement engine and the API."""


class BillSplitError(Exception):
    """Base class for every error raised by billsplit."""


class ValidationError(BillSplitError):
    """Malformed expense or group data: bad split, unknown member, non-positive amount."""


class ConfigurationError(BillSplitError):
    """Structurally invalid request, e.g. an empty member set or an empty selection."""


class InconsistencyError(BillSplitError):
    """Balances that do not cancel out, which means stored data is corrupt."""
