import pytest
from mytimetable_client import Configuration, MyTimetableService


@pytest.fixture
def configuration():
    return Configuration(api_key="mock-key", api_endpoint_uris=["https://mock-mtt.com/api/"])


@pytest.fixture
def service(configuration):
    svc = MyTimetableService(configuration)
    yield svc
    svc.close()
