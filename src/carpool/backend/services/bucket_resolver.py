"""
Bucket width selection under a bucket count budget.
"""

from datetime import datetime

# Target bucket count when the requested width is too fine
FALLBACK_BUCKETS = 256


def calculate_buckets(start: datetime, end: datetime, bucket_seconds: int) -> int:
    """Number of buckets of the given width in [start, end), at least 1"""
    duration = int((end - start).total_seconds())
    buckets = duration // max(bucket_seconds, 1)
    return max(buckets, 1)


def resolve_bucket_seconds(
    start: datetime,
    end: datetime,
    requested_bucket_seconds: int,
    max_buckets: int,
) -> int:
    """
    Pick the bucket width to request upstream.

    The requested width is kept unless it yields more than ``max_buckets``
    buckets, in which case a width giving roughly FALLBACK_BUCKETS buckets
    is returned instead.

    Args:
        start: Start of the query range
        end: End of the query range
        requested_bucket_seconds: Width requested by the caller
        max_buckets: Bucket count budget

    Returns:
        int: Bucket width in seconds, always >= 1
    """
    requested_bucket_seconds = max(requested_bucket_seconds, 1)
    buckets = calculate_buckets(start, end, requested_bucket_seconds)
    if buckets > max_buckets:
        duration = max(int((end - start).total_seconds()), 0)
        return duration // FALLBACK_BUCKETS + 1
    return requested_bucket_seconds
