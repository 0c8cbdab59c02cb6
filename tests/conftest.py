import pytest
from fastapi.testclient import TestClient

from fakes import FakeSheetsService, run
from sheetstore import SheetsClient, SheetStore


@pytest.fixture
def service():
    # both tabs exist but are empty, like a freshly created spreadsheet
    return FakeSheetsService({"users": [], "worklogs": []})


@pytest.fixture
def store(service):
    return SheetStore(SheetsClient(spreadsheet_id="test-sheet", service=service))


@pytest.fixture
def ready_store(store):
    run(store.initialize_all())
    return store


@pytest.fixture
def client(store):
    import main

    original = main.app.state.store
    main.app.state.store = store
    try:
        with TestClient(main.app) as c:
            yield c
    finally:
        main.app.state.store = original


@pytest.fixture
def register(client):
    def _register(username="alice", password="secret", display_name=None):
        body = {"username": username, "password": password}
        if display_name is not None:
            body["display_name"] = display_name
        resp = client.post("/auth/register", json=body)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]
    return _register
