import pytest

from carpool.backend.errors import BadRequest, DecodeError
from carpool.backend.models import UpstreamShape
from carpool.backend.services.decoder import decode
from tests.helpers import T0, T1, T2, body, invocation, program_event


def test_invocations_are_transposed_in_order():
    raw = body([
        invocation(T0, 5, "success", "transfer"),
        invocation(T1, 3, "error", "mint"),
        invocation(T2, 7, "success", "transfer"),
    ])
    series = decode(raw, UpstreamShape.INVOCATIONS)

    assert len(series) == 3
    assert series.counts == [5, 3, 7]
    assert series.label("status") == ["success", "error", "success"]
    assert series.label("instructionName") == ["transfer", "mint", "transfer"]
    assert [t.minute for t in series.times] == [0, 1, 2]
    assert list(series.columns()) == ["time", "count", "status", "instructionName"]


@pytest.mark.parametrize("k", [0, 1, 17])
def test_column_lengths_match_bucket_count(k):
    raw = body([invocation(T0, i) for i in range(k)])
    series = decode(raw, UpstreamShape.INVOCATIONS)
    assert {len(c) for c in series.columns().values()} == {k}


def test_signers_have_no_labels():
    raw = body([{"time": T0, "count": 4}, {"time": T1, "count": 9}])
    series = decode(raw, UpstreamShape.UNIQUE_SIGNERS)
    assert list(series.columns()) == ["time", "count"]
    assert series.counts == [4, 9]


@pytest.mark.parametrize(
    "shape", [UpstreamShape.PROGRAM_DEPLOYMENTS, UpstreamShape.FAILED_PROGRAM_DEPLOYMENTS]
)
def test_program_events_keep_authority_and_status_apart(shape):
    raw = body([program_event(T0, 1, "Auth1", "success", "deploy")])
    series = decode(raw, shape)
    assert series.label("authority") == ["Auth1"]
    assert series.label("status") == ["success"]
    assert series.label("action") == ["deploy"]


@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        b"",
        b'{"buckets": {"time": "x"}}',
        b'{"buckets": [{"time": "2024-01-01T00:00:00Z", "count": "many"}]}',
        b'{"buckets": [{"count": 1}]}',
        b"{}",
    ],
)
def test_invalid_bodies_raise_decode_error(raw):
    with pytest.raises(DecodeError) as exc_info:
        decode(raw, UpstreamShape.INVOCATIONS)
    assert isinstance(exc_info.value, BadRequest)
    assert exc_info.value.message.startswith("json unmarshal: ")
