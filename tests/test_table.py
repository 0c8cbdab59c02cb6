import httplib2
import pytest
from google.auth.exceptions import RefreshError, TransportError

from errors import StoreError
from fakes import FakeSheetsService, run
from sheetstore import SheetsClient, SheetTable, WORKLOGS
from sheetstore.codec import HEADER_MODE_HEADER

HEADER = list(WORKLOGS.columns)


def _table(service, header_mode="declared"):
    return SheetTable(SheetsClient(spreadsheet_id="s", service=service), WORKLOGS, header_mode)


def _log(n, user="user-1", date="2024-01-0{}"):
    return [f"log-{n}", user, date.format(n), str(n), "overtime", f"note {n}"]


def test_initialize_writes_header_once():
    svc = FakeSheetsService({"worklogs": []})
    table = _table(svc)
    assert run(table.initialize()) is True
    assert run(table.initialize()) is False
    assert svc.rows("worklogs") == [HEADER]


def test_initialize_leaves_existing_first_row_alone():
    svc = FakeSheetsService({"worklogs": [["something", "else"]]})
    assert run(_table(svc).initialize()) is False
    assert svc.rows("worklogs") == [["something", "else"]]


def test_initialize_adds_missing_tab():
    svc = FakeSheetsService({})
    assert run(_table(svc).initialize()) is True
    assert svc.rows("worklogs") == [HEADER]


def test_list_all_on_missing_tab_is_empty():
    svc = FakeSheetsService({})
    assert run(_table(svc).list_all()) == []


@pytest.mark.parametrize("status", [400, 404])
def test_missing_tab_statuses(status):
    svc = FakeSheetsService({}, missing_status=status)
    assert run(_table(svc).list_all()) == []


def test_list_all_other_errors_raise_store_error():
    svc = FakeSheetsService({"worklogs": [HEADER]})
    svc.fail_with = 403
    with pytest.raises(StoreError):
        run(_table(svc).list_all())


def test_list_all_in_insertion_order():
    svc = FakeSheetsService({"worklogs": [HEADER, _log(2), _log(1)]})
    ids = [r["id"] for r in run(_table(svc).list_all())]
    assert ids == ["log-2", "log-1"]


def test_append_lands_after_last_row():
    svc = FakeSheetsService({"worklogs": [HEADER, _log(1)]})
    table = _table(svc)
    written = run(table.append({"id": "log-2", "user_id": "user-1", "date": "2024-02-01",
                                "duration_hours": 3, "reason": "deploy", "extra": "x"}))
    assert written["notes"] == ""
    assert "extra" not in written
    assert svc.rows("worklogs")[2] == ["log-2", "user-1", "2024-02-01", "3", "deploy"]


def test_find_by_id_returns_first_match_and_position():
    svc = FakeSheetsService({"worklogs": [HEADER, _log(1), _log(2), _log(3)]})
    found = run(_table(svc).find_by_id("id", " log-2 "))
    assert found.position == 3
    assert found.record["id"] == "log-2"
    assert found.record["notes"] == "note 2"


def test_find_by_id_not_found_is_none():
    svc = FakeSheetsService({"worklogs": [HEADER, _log(1), _log(2)]})
    assert run(_table(svc).find_by_id("id", "log-999")) is None


def test_find_by_id_header_only_or_missing():
    assert run(_table(FakeSheetsService({"worklogs": [HEADER]})).find_by_id("id", "log-1")) is None
    assert run(_table(FakeSheetsService({"worklogs": []})).find_by_id("id", "log-1")) is None
    assert run(_table(FakeSheetsService({})).find_by_id("id", "log-1")) is None


def test_find_by_id_unknown_column():
    svc = FakeSheetsService({"worklogs": [HEADER, _log(1)]})
    assert run(_table(svc).find_by_id("uuid", "log-1")) is None


def test_find_by_id_uses_sheet_header_for_the_id_column():
    shuffled = ["user_id", "id", "date", "duration_hours", "reason", "notes"]
    svc = FakeSheetsService({"worklogs": [shuffled, ["user-1", "log-1", "2024-01-01", "1", "r", ""]]})
    found = run(_table(svc, HEADER_MODE_HEADER).find_by_id("id", "log-1"))
    assert found.position == 2
    assert found.record["user_id"] == "user-1"


def test_update_at_overwrites_whole_row():
    svc = FakeSheetsService({"worklogs": [HEADER, _log(1), _log(2)]})
    table = _table(svc)
    found = run(table.find_by_id("id", "log-2"))
    merged = {**found.record, "notes": None, "reason": "release"}
    run(table.update_at(found.position, merged))
    assert ("update", "'worklogs'!A3:F3") in svc.calls
    assert svc.sheets["worklogs"][2] == ["log-2", "user-1", "2024-01-02", "2", "release", ""]
    assert svc.rows("worklogs")[1] == _log(1)


def test_delete_at_shifts_following_rows_up():
    svc = FakeSheetsService({"worklogs": [HEADER, _log(1), _log(2), _log(3)]})
    table = _table(svc)
    assert run(table.find_by_id("id", "log-3")).position == 4
    run(table.delete_at(3))
    assert run(table.find_by_id("id", "log-2")) is None
    assert run(table.find_by_id("id", "log-3")).position == 3
    assert [r["id"] for r in run(table.list_all())] == ["log-1", "log-3"]


def test_delete_at_unknown_tab_is_store_error():
    svc = FakeSheetsService({"worklogs": [HEADER, _log(1)]})
    table = _table(svc)
    del svc.sheet_ids["worklogs"]
    with pytest.raises(StoreError):
        run(table.delete_at(2))
    assert ("batchUpdate", None) not in svc.calls


def test_delete_at_rejects_header_row():
    with pytest.raises(ValueError):
        run(_table(FakeSheetsService({"worklogs": [HEADER]})).delete_at(1))


def test_write_errors_are_store_errors_and_not_retried():
    svc = FakeSheetsService({"worklogs": [HEADER]})
    svc.fail_with = 500
    with pytest.raises(StoreError):
        run(_table(svc).append({"id": "log-1"}))
    assert svc.calls == [("append", "'worklogs'!A:F")]


@pytest.mark.parametrize("exc", [
    RefreshError("invalid_grant: account disabled"),
    TransportError("name resolution failed"),
    TimeoutError("timed out"),
    ConnectionResetError(104, "reset by peer"),
    httplib2.ServerNotFoundError("sheets.googleapis.com"),
])
def test_auth_and_socket_failures_are_store_errors(exc):
    svc = FakeSheetsService({"worklogs": [HEADER, _log(1)]})
    svc.fail_exc = exc
    table = _table(svc)
    with pytest.raises(StoreError) as info:
        run(table.list_all())
    assert info.value.__cause__ is exc
    with pytest.raises(StoreError):
        run(table.append({"id": "log-2"}))
    with pytest.raises(StoreError):
        run(table.initialize())


def test_requests_execute_on_the_client_thread_transport(monkeypatch):
    svc = FakeSheetsService({"worklogs": [HEADER]})
    table = _table(svc)
    transport = object()
    monkeypatch.setattr(table.client, "thread_http", lambda: transport)
    run(table.append({"id": "log-1"}))
    run(table.list_all())
    assert svc.transports == [transport, transport]


def test_injected_service_executes_without_transport_override():
    svc = FakeSheetsService({"worklogs": [HEADER]})
    run(_table(svc).list_all())
    assert svc.transports == [None]


def test_worklog_writes_are_raw():
    svc = FakeSheetsService({"worklogs": [HEADER, _log(1)]})
    table = _table(svc)
    run(table.append({"id": "log-2", "date": "2024-02-01"}))
    run(table.update_at(2, {"id": "log-1", "date": "2024-01-15"}))
    assert svc.value_inputs == [("append", "RAW"), ("update", "RAW")]
    assert [r[2] for r in svc.rows("worklogs")[1:]] == ["2024-01-15", "2024-02-01"]
