import pytest
from pydantic import ValidationError

from carpool.backend.errors import BadRequest, InvalidMetricType, MalformedQuery
from carpool.backend.models import DataQuery, Frame, MetricRequest, MetricType
from tests.helpers import data_query


def parse(raw):
    return MetricRequest.from_query(DataQuery.model_validate(raw))


def test_from_query():
    request = parse(data_query("topInstructions", instructionName="transfer", topN=3))
    assert request.metric_type is MetricType.TOP_INSTRUCTIONS
    assert request.program_id == "Prog1"
    assert request.instruction_name == "transfer"
    assert request.top_n == 3
    assert request.interval_seconds == 60
    assert (request.time_to - request.time_from).total_seconds() == 3600


def test_unknown_query_type_is_rejected():
    with pytest.raises(InvalidMetricType) as exc_info:
        parse(data_query("bogus"))
    assert exc_info.value.message == "invalid query type: bogus"
    assert exc_info.value.status == 400


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"queryType": "invocations"},
        {"queryType": "invocations", "programId": "P", "topN": "many"},
        "not json",
        ["invocations"],
    ],
)
def test_malformed_payloads(payload):
    raw = data_query("invocations")
    raw["payload"] = payload
    with pytest.raises(MalformedQuery) as exc_info:
        parse(raw)
    assert exc_info.value.message.startswith("json unmarshal: ")


@pytest.mark.parametrize("program_id", ["", "   "])
def test_blank_program_id_is_rejected(program_id):
    with pytest.raises(BadRequest) as exc_info:
        parse(data_query("invocations", program_id=program_id))
    assert exc_info.value.message == "programId is required"
    assert not isinstance(exc_info.value, MalformedQuery)


@pytest.mark.parametrize(
    "time_range",
    [
        {"from": "0001-01-01T00:00:00+01:00", "to": "2024-01-01T00:00:00Z"},
        {"from": "2024-01-01T00:00:00Z", "to": "9999-12-31T23:00:00-02:00"},
    ],
)
def test_time_range_outside_utc_is_malformed(time_range):
    raw = data_query("invocations")
    raw["timeRange"] = time_range
    with pytest.raises(MalformedQuery):
        parse(raw)


def test_payload_may_be_a_json_string():
    raw = data_query("invocations")
    raw["payload"] = '{"queryType": "failures", "programId": "P"}'
    assert parse(raw).metric_type is MetricType.FAILURES


def test_sub_second_interval_becomes_one_second():
    assert parse(data_query("invocations", interval_ms=250)).interval_seconds == 1


def test_naive_timestamps_are_utc():
    raw = data_query("invocations")
    raw["timeRange"] = {"from": "2024-01-01T00:00:00", "to": "2024-01-01T01:00:00"}
    request = parse(raw)
    assert request.time_from.utcoffset().total_seconds() == 0


def test_metric_request_is_immutable():
    request = parse(data_query("invocations"))
    with pytest.raises(ValidationError):
        request.top_n = 5


def test_frame_rejects_uneven_columns():
    with pytest.raises(ValidationError):
        Frame.from_columns({"time": [1, 2], "count": [1]})


def test_frame_from_columns():
    frame = Frame.from_columns({"time": [1], "count": [2]})
    assert frame.name == "Long"
    assert frame.meta.type == "timeseries-long"
    assert frame.column("count") == [2]
