"""Scoring services: the aggregation engine and its database snapshot loader.

Aggregation works on plain roster/submission values so it can be driven
from routes, the CLI, or tests without a request context.
"""

from .aggregation import (
    GROUP_TYPES,
    NOMINAL,
    REGULAR,
    AggregateResults,
    GroupResult,
    GroupRoster,
    Member,
    Submissions,
    compute_all_results,
)
