import json

from registry.api import create_connection, list_connections
from utils.connections_file import save_connections_to_file, sync_connections_from_file


async def test_missing_file_is_written_from_registry(db, connections_file):
    await create_connection(db, name="Bot A", api_url="http://a:8080", username="u", password="p")

    added = await sync_connections_from_file(db)

    assert added == 0
    data = json.loads(connections_file.read_text())
    assert [c["name"] for c in data] == ["Bot A"]
    assert data[0]["password"] == "p"


async def test_unknown_names_are_imported(db, connections_file):
    await create_connection(db, name="Bot A", api_url="http://a:8080", username="u", password="p")
    connections_file.parent.mkdir(parents=True)
    connections_file.write_text(json.dumps([
        {"name": "Bot A", "apiUrl": "http://other:1", "username": "x", "password": "y"},
        {"name": "Bot B", "apiUrl": "http://b:8080/", "username": "u2", "password": "p2", "isActive": False},
        {"name": "", "api_url": "http://c", "username": "u", "password": "p"},
        "garbage",
    ]))

    added = await sync_connections_from_file(db)

    assert added == 1
    rows = {c["name"]: c for c in await list_connections(db)}
    assert set(rows) == {"Bot A", "Bot B"}
    assert rows["Bot A"]["apiUrl"] == "http://a:8080"
    assert rows["Bot B"]["apiUrl"] == "http://b:8080"
    assert rows["Bot B"]["isActive"] is False
    on_disk = json.loads(connections_file.read_text())
    assert {c["name"] for c in on_disk} == {"Bot A", "Bot B"}
    assert all("id" in c for c in on_disk)


async def test_corrupt_file_is_replaced(db, connections_file):
    connections_file.parent.mkdir(parents=True)
    connections_file.write_text("{not json")

    assert await sync_connections_from_file(db) == 0
    assert json.loads(connections_file.read_text()) == []


async def test_save_failure_is_logged_not_raised(db, tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    await save_connections_to_file(db, blocker / "connections.json")

    assert any("Failed to save connections" in r.getMessage() for r in caplog.records)


async def test_file_is_written_off_the_event_loop(db, connections_file, monkeypatch):
    import threading
    from utils import connections_file as mirror

    threads = []
    real_write = mirror._write_file

    def recording_write(path, connections):
        threads.append(threading.get_ident())
        real_write(path, connections)

    monkeypatch.setattr(mirror, "_write_file", recording_write)
    await create_connection(db, name="Bot A", api_url="http://a:8080", username="u", password="p")

    await save_connections_to_file(db)

    assert threads and threads[0] != threading.get_ident()
    assert json.loads(connections_file.read_text())[0]["name"] == "Bot A"
