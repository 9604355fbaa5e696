"""
API tests - calculation, validation, history CRUD and report download.
"""
import pytest
from fastapi.testclient import TestClient

from autopricing.api.main import app
from autopricing.api.state import get_engine, get_history_store
from autopricing.services.history_service import HistoryStore


@pytest.fixture
def client(engine, store, settings):
    history = HistoryStore(store, settings)
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_history_store] = lambda: history
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_calculate_itemized(client, itemized_input):
    response = client.post("/calculate", json={"mode": "itemized", "input": itemized_input})

    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "itemized"
    assert data["totalPrice"] == pytest.approx(205.632)
    assert data["display"]["final_price"] == "$205.63"
    assert data["display"]["trace"][0]["step"] == "Base Cost"


def test_calculate_unit_cost(client, unit_cost_input):
    response = client.post("/calculate", json={"mode": "unit_cost", "input": unit_cost_input})

    assert response.status_code == 200
    assert response.json()["sellingPrice"] == pytest.approx(76.0714285, rel=1e-6)


def test_calculate_strict_rejects_bad_input(client):
    response = client.post("/calculate", json={
        "input": {"product_name": "", "material_cost": "-3"},
        "strict": True,
    })

    assert response.status_code == 422
    errors = response.json()["detail"]["errors"]
    assert "Product Name is required" in errors
    assert "Material Cost cannot be negative" in errors


def test_calculate_lenient_coerces(client):
    response = client.post("/calculate", json={"input": {"product_name": "x", "material_cost": "abc"}})
    assert response.status_code == 200
    assert response.json()["totalPrice"] == 0


def test_calculate_oversized_integer(client):
    response = client.post("/calculate", json={"input": {"product_name": "x", "material_cost": 10 ** 400}})
    assert response.status_code == 200
    assert response.json()["totalPrice"] == 0

    response = client.post("/calculate", json={
        "input": {"product_name": "x", "material_cost": 10 ** 400},
        "strict": True,
    })
    assert response.status_code == 422
    assert any("Material Cost must be a number" in e for e in response.json()["detail"]["errors"])


def test_validate_endpoint(client):
    response = client.post("/validate", json={"input": {"product_name": "x", "labor_cost": "ten"}})

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert any("Labor Cost" in e for e in body["errors"])


def test_history_crud(client, itemized_input):
    for name in ("C", "B", "A"):
        response = client.post("/history", json={"input": {**itemized_input, "product_name": name}})
        assert response.status_code == 201

    names = [r["productName"] for r in client.get("/history").json()]
    assert names == ["A", "B", "C"]

    response = client.delete("/history/1")
    assert response.status_code == 200
    assert response.json()["count"] == 2
    assert [r["productName"] for r in client.get("/history").json()] == ["A", "C"]

    assert client.delete("/history/5").status_code == 404

    assert client.delete("/history").json()["count"] == 0
    assert client.get("/history").json() == []


def test_history_report_download(client, itemized_input):
    client.post("/history", json={"input": itemized_input})

    response = client.get("/history/0/report")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "Oak_Table_pricing.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")

    assert client.get("/history/3/report").status_code == 404


def test_history_csv_download(client, itemized_input):
    client.post("/history", json={"input": itemized_input})

    response = client.get("/history/export.csv")

    assert response.status_code == 200
    assert response.text.splitlines()[0].startswith("Date,Mode,Product")
    assert "Oak Table" in response.text
