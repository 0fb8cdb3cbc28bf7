from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)

TILES = (
    "Title,Link,Reference Link,Description,Taglines,Icon\n"
    "Runbook,http://a,http://b,Ops <b>runbook</b>,\"Phase 1, Learning\",📘\n"
    "Roadmap,http://c,,,Phase 10,\n"
    "Wiki,http://d,,,,\n"
)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_dashboard_renders_groups_in_order(tmp_path, monkeypatch):
    source = tmp_path / "tiles.csv"
    source.write_text(TILES, encoding="utf-8")
    monkeypatch.setenv("TILES_SOURCE", str(source))
    monkeypatch.setenv("DASHBOARD_TITLE", "Team Links")

    r = client.get("/")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")

    body = r.text
    assert "<title>Team Links</title>" in body
    positions = [body.index(f"<h2>{tag}</h2>") for tag in ("Phase 1", "Phase 10", "Learning", "Other")]
    assert positions == sorted(positions)
    assert "Ops &lt;b&gt;runbook&lt;/b&gt;" in body
    assert "<b>runbook</b>" not in body
    assert "tiles.csv" in body


def test_dashboard_falls_back_when_source_missing(tmp_path, monkeypatch):
    monkeypatch.setenv("TILES_SOURCE", str(tmp_path / "missing.csv"))

    r = client.get("/")
    assert r.status_code == 200
    assert "SOPs" in r.text
    assert "Jira Tickets" in r.text
    assert "fallback" in r.text


def test_groups_json(tmp_path, monkeypatch):
    source = tmp_path / "tiles.tsv"
    source.write_text(TILES.replace(",", "\t").replace('"Phase 1\t Learning"', "Phase 1, Learning"), encoding="utf-8")
    monkeypatch.setenv("TILES_SOURCE", str(source))

    r = client.get("/groups")
    assert r.status_code == 200

    data = r.json()
    assert [g["tag"] for g in data["groups"]] == ["Phase 1", "Phase 10", "Learning", "Other"]
    assert data["load"]["delimiter"] == "tab"
    assert data["load"]["total_tiles"] == 3
    assert data["load"]["fallback"] is False
    assert data["groups"][0]["members"][0]["url"] == "http://a"


def test_render_upload():
    files = {"file": ("tiles.csv", TILES.encode("utf-8"), "text/csv")}
    r = client.post("/render", files=files)
    assert r.status_code == 200
    assert "<h2>Phase 10</h2>" in r.text


def test_render_upload_empty_file_uses_fallback():
    files = {"file": ("empty.csv", b"", "text/csv")}
    r = client.post("/render", files=files)
    assert r.status_code == 200
    assert "<h2>Other</h2>" in r.text
    assert "Jira Tickets" in r.text


def test_render_upload_rejects_other_types():
    files = {"file": ("tiles.pdf", b"%PDF-1.4", "application/pdf")}
    r = client.post("/render", files=files)
    assert r.status_code == 422


def test_render_upload_drops_unsafe_links():
    raw = b"Title,Link,Reference Link\nEvil,javascript:alert(1),JAVASCRIPT:alert(2)\nLocal,/docs,#top\n"
    files = {"file": ("tiles.csv", raw, "text/csv")}
    r = client.post("/render", files=files)
    assert r.status_code == 200
    assert "Evil" in r.text
    assert "javascript:" not in r.text.lower()
    assert 'href="/docs"' in r.text
    assert 'href="#top"' in r.text


def test_render_upload_survives_huge_phase_number():
    raw = ("Title,Link,Taglines\nFoo,http://a,Phase " + "9" * 5000 + "\n").encode("utf-8")
    files = {"file": ("tiles.csv", raw, "text/csv")}
    r = client.post("/render", files=files)
    assert r.status_code == 200
    assert "Foo" in r.text
