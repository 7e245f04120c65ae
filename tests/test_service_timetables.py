from pathlib import Path

import pytest
import respx
from httpx import Response
from mytimetable_client.models import TimetableFilterOption

TIMETABLES_URL = "https://mock-mtt.com/api/v0/timetables"
EXPECTED_PATH = "/api/v0/timetables"
EMPTY_GET_TIMETABLE_RESPONSE = {"timetable": []}

TEST_TIMETABLE_TYPE = "module"
TEST_DS = "2017"
OPTION_ID = "646ADCA666D4A88402CA46C26A73803C"


def _sent_params(route):
    return route.calls.last.request.url.params.multi_items()


def _option() -> TimetableFilterOption:
    return TimetableFilterOption(id=OPTION_ID)


def test_get_no_type_never_reaches_transport(service):
    with respx.mock(assert_all_called=False) as mock:
        route = mock.get(TIMETABLES_URL).mock(
            return_value=Response(200, json=EMPTY_GET_TIMETABLE_RESPONSE)
        )

        with pytest.raises(ValueError):
            service.get_timetables(None, None, None, None, 0, 0)

    assert not route.called
    assert mock.calls.call_count == 0


@respx.mock
def test_get_for_type(service):
    route = respx.get(TIMETABLES_URL).mock(
        return_value=Response(200, json=EMPTY_GET_TIMETABLE_RESPONSE)
    )

    result = service.get_timetables(TEST_TIMETABLE_TYPE, None, None, None, 0, 0)

    assert result == []
    assert route.call_count == 1
    request = route.calls.last.request
    assert request.method == "GET"
    assert request.url.path == EXPECTED_PATH
    assert _sent_params(route) == [("type", TEST_TIMETABLE_TYPE)]


@respx.mock
def test_get_for_type_and_data_source(service):
    route = respx.get(TIMETABLES_URL).mock(
        return_value=Response(200, json=EMPTY_GET_TIMETABLE_RESPONSE)
    )

    service.get_timetables(TEST_TIMETABLE_TYPE, TEST_DS, None, None, 0, 0)

    params = _sent_params(route)
    assert len(params) == 2
    assert ("type", TEST_TIMETABLE_TYPE) in params
    assert ("ds", TEST_DS) in params


@respx.mock
def test_get_for_type_and_query(service):
    route = respx.get(TIMETABLES_URL).mock(
        return_value=Response(200, json=EMPTY_GET_TIMETABLE_RESPONSE)
    )

    service.get_timetables(TEST_TIMETABLE_TYPE, None, "test", None, 0, 0)

    params = _sent_params(route)
    assert len(params) == 2
    assert ("query", "test") in params


@respx.mock
def test_get_for_type_and_filter_option(service):
    route = respx.get(TIMETABLES_URL).mock(
        return_value=Response(200, json=EMPTY_GET_TIMETABLE_RESPONSE)
    )

    service.get_timetables(
        TEST_TIMETABLE_TYPE, None, None, {"department": _option()}, 10, 0
    )

    assert route.calls.last.request.url.path == EXPECTED_PATH
    params = _sent_params(route)
    assert len(params) == 3
    assert ("type", TEST_TIMETABLE_TYPE) in params
    assert ("limit", "10") in params
    assert ("departmentFilter", OPTION_ID) in params


@respx.mock
def test_get_for_type_and_multiple_filter_options(service):
    route = respx.get(TIMETABLES_URL).mock(
        return_value=Response(200, json=EMPTY_GET_TIMETABLE_RESPONSE)
    )

    filter_options = dict(
        sorted({TEST_TIMETABLE_TYPE: _option(), "department": _option()}.items())
    )
    service.get_timetables(TEST_TIMETABLE_TYPE, None, None, filter_options, 10, 0)

    assert _sent_params(route) == [
        ("type", TEST_TIMETABLE_TYPE),
        ("limit", "10"),
        ("departmentFilter", OPTION_ID),
        ("moduleFilter", OPTION_ID),
    ]


@respx.mock
def test_get_for_type_and_limit(service):
    route = respx.get(TIMETABLES_URL).mock(
        return_value=Response(200, json=EMPTY_GET_TIMETABLE_RESPONSE)
    )

    service.get_timetables(TEST_TIMETABLE_TYPE, None, None, None, 10, 0)

    assert _sent_params(route) == [("type", TEST_TIMETABLE_TYPE), ("limit", "10")]


@respx.mock
def test_get_for_type_and_offset(service):
    route = respx.get(TIMETABLES_URL).mock(
        return_value=Response(200, json=EMPTY_GET_TIMETABLE_RESPONSE)
    )

    service.get_timetables(TEST_TIMETABLE_TYPE, None, None, None, 0, 10)

    assert _sent_params(route) == [("type", TEST_TIMETABLE_TYPE), ("offset", "10")]


@respx.mock
def test_get_timetables_maps_payload(service):
    body = (Path(__file__).parent / "fixtures" / "timetables.json").read_bytes()
    respx.get(TIMETABLES_URL).mock(return_value=Response(200, content=body))

    timetables = service.get_timetables(TEST_TIMETABLE_TYPE)

    assert timetables[0].id == OPTION_ID
    assert timetables[0].key == "WISB101"
    assert timetables[1].description == "Linear Algebra"


@respx.mock
def test_get_timetable_map(service):
    body = (Path(__file__).parent / "fixtures" / "timetables.json").read_bytes()
    respx.get(TIMETABLES_URL).mock(return_value=Response(200, content=body))

    by_id = service.get_timetable_map(TEST_TIMETABLE_TYPE, TEST_DS)

    assert by_id[OPTION_ID].description == "Analysis 1"
    assert len(by_id) == 3


@respx.mock
def test_get_timetable_filter_types(service):
    body = (Path(__file__).parent / "fixtures" / "filter_types.json").read_bytes()
    route = respx.get("https://mock-mtt.com/api/v0/timetables/filterattributes").mock(
        return_value=Response(200, content=body)
    )

    filter_types = service.get_timetable_filter_types(TEST_TIMETABLE_TYPE, TEST_DS)

    assert [ft.id for ft in filter_types] == ["department", "faculty"]
    assert _sent_params(route) == [("type", TEST_TIMETABLE_TYPE), ("ds", TEST_DS)]


def test_get_timetable_filter_types_requires_type(service):
    with respx.mock(assert_all_called=False) as mock:
        with pytest.raises(ValueError):
            service.get_timetable_filter_types(None)

    assert mock.calls.call_count == 0
