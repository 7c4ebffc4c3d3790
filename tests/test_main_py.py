from dataclasses import replace

from fastapi.testclient import TestClient

import main
from mcr import journal

CONFIGS = {
    "text": {"type": "text_block", "options": {"label": "Text"}},
    "image": {"type": "image_block"},
}


def test_health():
    with TestClient(main.app) as client:
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "healthy"}


def test_preview_runs_one_cycle():
    body = {
        "configs": CONFIGS,
        "options": {"allow_add": True, "allow_delete": True, "delete_empty": True},
        "data": {"x": {"type": "text", "body": "hello"}},
        "submitted": {"x": "", "y": {"type": "image", "src": "y.png"}},
    }
    with TestClient(main.app) as client:
        r = client.post("/preview", json=body)

    assert r.status_code == 200
    out = r.json()
    assert out["initial_rows"] == [{"key": "x", "prototype": "text", "data": {"type": "text", "body": "hello"}}]
    assert out["submitted_rows"] == [{"key": "y", "prototype": "image", "data": {"type": "image", "src": "y.png"}}]
    assert out["data"] == {"y": {"type": "image", "src": "y.png"}}
    assert ["remove", "x"] in out["effects"]


def test_preview_uses_custom_discriminator():
    body = {
        "configs": CONFIGS,
        "discriminator": "kind",
        "data": [{"kind": "image"}, {"kind": "text"}],
    }
    with TestClient(main.app) as client:
        r = client.post("/preview", json=body)

    assert r.status_code == 200
    rows = r.json()["initial_rows"]
    assert [(row["key"], row["prototype"]) for row in rows] == [("0", "image"), ("1", "text")]


def test_preview_reports_reconciler_errors_as_422():
    with TestClient(main.app) as client:
        r = client.post("/preview", json={"configs": CONFIGS, "data": "not-an-array"})
        assert r.status_code == 422
        assert "not-an-array" not in r.json()["detail"]
        assert "str" in r.json()["detail"]

        r = client.post("/preview", json={"configs": CONFIGS, "data": {"a": {"type": "video"}}})
        assert r.status_code == 422
        assert "video" in r.json()["detail"]


def test_preview_rejects_invalid_config():
    with TestClient(main.app) as client:
        r = client.post("/preview", json={"configs": {"text": {"options": {}}}})
        assert r.status_code == 422


def test_events_endpoint_reads_journal(journal_db, monkeypatch):
    journal.log_event("INFO", "hello", form_name="blocks", row_key="a")
    with TestClient(main.app) as client:
        r = client.get("/events", params={"limit": 5})
    assert r.status_code == 200
    events = r.json()
    assert any(e["message"] == "hello" and e["row_key"] == "a" for e in events)


def test_events_endpoint_empty_when_journal_disabled(monkeypatch):
    monkeypatch.setattr(journal, "settings", replace(journal.settings, enable_journal=False))
    with TestClient(main.app) as client:
        r = client.get("/events")
    assert r.status_code == 200
    assert r.json() == []
