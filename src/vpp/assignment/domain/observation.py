"""Combine the VPP status read and the catalog read into one Observation.

This is a pure function of the two read results, so every branch of the
view selection can be tested without a network or an event loop.
"""

from typing import Any, Iterable, Optional

from ...api.query_cache import QueryResult
from .entities import LicenseApp, Observation
from .errors import is_not_configured


def combine_observation(
    status: Optional[QueryResult[Any]],
    catalog: Optional[QueryResult[Iterable[LicenseApp]]],
) -> Observation:
    """Project the two dependent reads onto what the view can show.

    Args:
        status: Result of the VPP status read, None if never issued
        catalog: Result of the catalog read for the active team, None if
            never issued

    Returns:
        LOADING while either read is pending or the catalog read has not
        been issued yet, NOT_CONFIGURED when the status read failed for lack
        of a VPP token (the catalog is ignored), ERRORED for any other
        failure, READY with the catalog when both reads succeeded.
    """
    if status is None or status.is_pending:
        return Observation.loading()

    if status.is_error:
        if is_not_configured(status.error):
            return Observation.not_configured(status.error)
        return Observation.errored(status.error)

    if catalog is None or catalog.is_pending:
        return Observation.loading()

    if catalog.is_error:
        return Observation.errored(catalog.error)

    return Observation.ready(catalog.data or ())
