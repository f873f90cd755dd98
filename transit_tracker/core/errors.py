"""Failure types raised by the feed pipeline.

Per-entity problems (missing ids, missing coordinates, implausible
timestamps) are not exceptions: the decoder counts and logs them. Only
whole-feed and store-level failures are modelled here.
"""


class FeedError(Exception):
    """Base class for feed retrieval and decoding failures."""


class FeedDecodeError(FeedError):
    """The payload could not be parsed as a GTFS-Realtime FeedMessage."""


class ReconciliationError(Exception):
    """Base class for store failures raised by the reconciliation engine.

    ``upserted`` is the number of rows already committed when the failure
    happened; it is non-zero only when the deactivation step fails.
    """

    upserted = 0


class TransactionFailure(ReconciliationError):
    """The upsert transaction failed and was rolled back."""


class DeactivationFailure(ReconciliationError):
    """Marking absent vehicles inactive failed after the upsert committed."""


class ConnectivityFailure(ReconciliationError):
    """The store could not be reached."""
