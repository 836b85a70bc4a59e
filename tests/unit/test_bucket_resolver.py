from datetime import datetime, timedelta, timezone

import pytest

from carpool.backend.services.bucket_resolver import calculate_buckets, resolve_bucket_seconds

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_clamps_to_fallback_width_when_over_budget():
    end = START + timedelta(hours=1)
    # 3600 / 10 = 360 buckets > 100
    assert resolve_bucket_seconds(START, end, 10, 100) == 15


def test_keeps_requested_width_within_budget():
    end = START + timedelta(hours=1)
    assert resolve_bucket_seconds(START, end, 60, 100) == 60


def test_exactly_at_budget_is_kept():
    end = START + timedelta(seconds=1000)
    assert resolve_bucket_seconds(START, end, 10, 100) == 10


@pytest.mark.parametrize("delta", [timedelta(0), timedelta(seconds=-30)])
def test_empty_or_inverted_range_counts_one_bucket(delta):
    end = START + delta
    assert calculate_buckets(START, end, 10) == 1
    assert resolve_bucket_seconds(START, end, 10, 100) == 10


def test_empty_range_with_tiny_budget_never_divides_by_zero():
    # one bucket is within any budget >= 1
    assert resolve_bucket_seconds(START, START, 5, 1) == 5


def test_zero_requested_width_is_treated_as_one_second():
    end = START + timedelta(seconds=30)
    assert resolve_bucket_seconds(START, end, 0, 100) == 1


@pytest.mark.parametrize("seconds", [1, 59, 3600, 86400, 7 * 86400, 30 * 86400])
@pytest.mark.parametrize("width", [1, 10, 60, 300])
@pytest.mark.parametrize("max_buckets", [256, 1000])
def test_resolved_width_respects_budget(seconds, width, max_buckets):
    end = START + timedelta(seconds=seconds)
    resolved = resolve_bucket_seconds(START, end, width, max_buckets)
    assert resolved >= 1
    assert calculate_buckets(START, end, resolved) <= max_buckets
