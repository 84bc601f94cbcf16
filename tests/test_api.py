from fastapi.testclient import TestClient

from api.main import app

client = TestClient(app)


def test_health():
    assert client.get("/health").json() == {"ok": True}


def test_eval_metric():
    r = client.post("/eval", json={"input": "2+3*4", "unit_system": "metric"})
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["value"] == 14
    assert body["display"] == "14m"
    assert body["unit"] == "m"


def test_eval_imperial_feet_and_inches():
    body = client.post("/eval", json={"input": "3.5", "unit_system": "imperial"}).json()
    assert body["display"] == "3'6\""
    assert body["unit"] == "ft"
    assert body["scale"] == 12000.0
    assert body["magnitude"] == 3.5


def test_eval_with_previous():
    previous = {"value": 24000, "scale": 12000, "system": "imperial"}
    body = client.post("/eval", json={"input": "5", "unit_system": "imperial", "previous": previous}).json()
    assert body["display"] == "5ft"


def test_eval_error():
    r = client.post("/eval", json={"input": "1 2", "unit_system": "metric"})
    assert r.status_code == 422
    assert r.json() == {"ok": False, "stage": "SOLVE", "error": "Indeterminate Expression"}


def test_eval_trace():
    body = client.post("/eval", json={"input": "1+2", "unit_system": "metric", "trace": True}).json()
    assert [s["kind"] for s in body["trace"]] == ["input", "tokens", "postfix", "solution"]


def test_format():
    solution = {"value": 1500, "scale": 12000, "system": "imperial"}
    body = client.post("/format", json={"solution": solution, "unit_system": "imperial"}).json()
    assert body["display"] == "1/8ft"


def test_units():
    body = client.get("/units", params={"unit_system": "imperial"}).json()
    assert "'" in body["ft"]
    assert "thou" in body["th"]


def test_eval_overflow_is_rejected():
    r = client.post("/eval", json={"input": "9" * 400, "unit_system": "imperial"})
    assert r.status_code == 422
    assert r.json() == {"ok": False, "stage": "PARSE", "error": "Numeric literal out of range"}


def test_format_rejects_zero_scale():
    solution = {"value": 1500, "scale": 0, "system": "imperial"}
    assert client.post("/format", json={"solution": solution}).status_code == 422
