"""Formula and category endpoint tests

Covers:
1. Formula CRUD and response shaping (no metrics, no scores)
2. Category CRUD and category filters
3. Trending endpoint ordering and parameter validation
4. Admin token on write endpoints
"""

import pytest
from fastapi.testclient import TestClient

from formulary.config import Settings


def create_category(client, name, description=None):
    resp = client.post("/api/categories", json={"name": name, "description": description})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_formula(client, name, category_ids=(), **overrides):
    payload = {
        "name": name,
        "description": f"{name} description",
        "formula": "=SUM(A1:A3)",
        "videoUrl": "",
        "categoryIds": list(category_ids),
    }
    payload.update(overrides)
    resp = client.post("/api/formulas", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def copy(client, formula_id, fresh_session=False):
    if fresh_session:
        client.cookies.clear()
    resp = client.post("/api/metrics/copy", json={"formulaId": formula_id})
    assert resp.status_code == 200, resp.text
    return resp.json()


class TestHealth:
    """Root and health endpoints"""

    def test_health(self, client: TestClient):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}

    def test_root(self, client: TestClient):
        assert client.get("/").json()["message"] == "Formulary API"


class TestFormulaCrud:
    """Create / read / update / delete"""

    def test_create_returns_public_fields_only(self, client: TestClient):
        category = create_category(client, "Basics")

        body = create_formula(client, "Total", [category["id"]], videoUrl="https://example.com/v")

        assert body["id"].startswith("formula_")
        assert body["name"] == "Total"
        assert body["videoUrl"] == "https://example.com/v"
        assert body["categoryIds"] == [category["id"]]
        assert body["createdAt"] is not None
        for internal in ("totalEvents", "total_events", "lastEventAt", "last_event_at", "score"):
            assert internal not in body

    def test_get_by_id(self, client: TestClient):
        created = create_formula(client, "Lookup")

        resp = client.get(f"/api/formulas/{created['id']}")

        assert resp.status_code == 200
        assert resp.json() == created

    def test_get_unknown_is_404(self, client: TestClient):
        assert client.get("/api/formulas/formula_0_missing").status_code == 404

    @pytest.mark.parametrize(
        "override",
        [{"name": ""}, {"description": ""}, {"formula": ""}, {"videoUrl": "not-a-url"}],
    )
    def test_create_validates_fields(self, client: TestClient, override):
        payload = {"name": "X", "description": "d", "formula": "=1", "videoUrl": ""}
        payload.update(override)
        assert client.post("/api/formulas", json=payload).status_code == 422

    def test_create_with_unknown_category_is_400(self, client: TestClient):
        resp = client.post(
            "/api/formulas",
            json={"name": "X", "description": "d", "formula": "=1", "categoryIds": [999]},
        )
        assert resp.status_code == 400

    def test_partial_update(self, client: TestClient):
        first = create_category(client, "First")
        second = create_category(client, "Second")
        created = create_formula(client, "Old name", [first["id"]])

        resp = client.put(
            f"/api/formulas/{created['id']}",
            json={"name": "New name", "categoryIds": [second["id"]]},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "New name"
        assert body["formula"] == created["formula"]
        assert body["categoryIds"] == [second["id"]]

    def test_update_unknown_is_404(self, client: TestClient):
        resp = client.put("/api/formulas/formula_0_missing", json={"name": "x"})
        assert resp.status_code == 404

    def test_delete(self, client: TestClient):
        created = create_formula(client, "Doomed")
        copy(client, created["id"])

        resp = client.delete(f"/api/formulas/{created['id']}")

        assert resp.status_code == 200
        assert client.get(f"/api/formulas/{created['id']}").status_code == 404
        assert client.delete(f"/api/formulas/{created['id']}").status_code == 404

    def test_list_all_newest_first(self, client: TestClient):
        a = create_formula(client, "A")
        b = create_formula(client, "B")

        ids = [f["id"] for f in client.get("/api/formulas").json()]

        assert ids == [b["id"], a["id"]]

    def test_list_by_category_orders_by_recent_copy(self, client: TestClient):
        category = create_category(client, "Filtered")
        other = create_category(client, "Other")
        older = create_formula(client, "Older", [category["id"]])
        create_formula(client, "Newer", [category["id"]])
        create_formula(client, "Elsewhere", [other["id"]])
        copy(client, older["id"])

        resp = client.get("/api/formulas", params={"categoryIds": str(category["id"])})

        names = [f["name"] for f in resp.json()]
        assert names == ["Older", "Newer"]

    def test_unparseable_category_filter_still_paginates(self, client: TestClient):
        for name in ("A", "B", "C"):
            create_formula(client, name)

        resp = client.get("/api/formulas", params={"categoryIds": "abc", "pageSize": 1})

        assert resp.status_code == 200
        assert [f["name"] for f in resp.json()] == ["C"]

    def test_unknown_formula_detail_names_model_and_id(self, client: TestClient):
        resp = client.get("/api/formulas/formula_0_missing")

        assert resp.json()["detail"] == "Formula not found: formula_0_missing"


class TestCategories:
    """Category endpoints"""

    def test_crud(self, client: TestClient):
        created = create_category(client, "Text", "String helpers")

        assert client.get(f"/api/categories/{created['id']}").json()["name"] == "Text"

        resp = client.put(f"/api/categories/{created['id']}", json={"description": "Text helpers"})
        assert resp.status_code == 200
        assert resp.json()["description"] == "Text helpers"
        assert resp.json()["name"] == "Text"

        assert client.delete(f"/api/categories/{created['id']}").status_code == 200
        assert client.get(f"/api/categories/{created['id']}").status_code == 404

    def test_list_sorted_by_name(self, client: TestClient):
        create_category(client, "Zeta")
        create_category(client, "Alpha")

        names = [c["name"] for c in client.get("/api/categories").json()]

        assert names == ["Alpha", "Zeta"]

    def test_duplicate_name_is_409(self, client: TestClient):
        create_category(client, "Dup")
        assert client.post("/api/categories", json={"name": "Dup"}).status_code == 409

    def test_deleting_category_keeps_formulas(self, client: TestClient):
        category = create_category(client, "Gone")
        formula = create_formula(client, "Survivor", [category["id"]])

        client.delete(f"/api/categories/{category['id']}")

        body = client.get(f"/api/formulas/{formula['id']}").json()
        assert body["categoryIds"] == []


class TestTrending:
    """GET /api/formulas/trending"""

    def test_orders_by_copy_activity(self, client: TestClient):
        hot = create_formula(client, "Hot")
        warm = create_formula(client, "Warm")
        cold = create_formula(client, "Cold")
        for _ in range(3):
            copy(client, hot["id"], fresh_session=True)
        copy(client, warm["id"], fresh_session=True)

        resp = client.get("/api/formulas/trending")

        assert resp.status_code == 200
        assert [f["id"] for f in resp.json()] == [hot["id"], warm["id"], cold["id"]]

    def test_response_hides_scores(self, client: TestClient):
        create_formula(client, "Only")

        [body] = client.get("/api/formulas/trending").json()

        assert "score" not in body
        assert "totalEvents" not in body

    def test_category_filter(self, client: TestClient):
        wanted = create_category(client, "Wanted")
        other = create_category(client, "Other")
        inside = create_formula(client, "Inside", [wanted["id"]])
        outside = create_formula(client, "Outside", [other["id"]])
        copy(client, outside["id"])

        resp = client.get("/api/formulas/trending", params={"categoryIds": f"{wanted['id']},abc"})

        assert [f["id"] for f in resp.json()] == [inside["id"]]

    def test_pagination(self, client: TestClient):
        for i in range(5):
            create_formula(client, f"F{i}")

        page_3 = client.get("/api/formulas/trending", params={"page": 3, "pageSize": 2}).json()
        page_4 = client.get("/api/formulas/trending", params={"page": 4, "pageSize": 2}).json()

        assert len(page_3) == 1
        assert page_4 == []

    @pytest.mark.parametrize(
        "params",
        [{"page": 0}, {"pageSize": 0}, {"pageSize": 101}, {"page": "x"}],
    )
    def test_rejects_bad_pagination(self, client: TestClient, params):
        assert client.get("/api/formulas/trending", params=params).status_code == 422

    def test_issues_session_cookie(self, client: TestClient):
        resp = client.get("/api/formulas/trending")
        assert "sid" in resp.cookies


class TestAdminToken:
    """Write endpoints with ADMIN_TOKEN configured"""

    @pytest.fixture
    def secured_client(self, tmp_path):
        from formulary.main import create_app

        settings = Settings(
            database_url=f"sqlite:///{tmp_path / 'secured.db'}",
            secret_key="test-secret",
            environment="test",
            admin_token="s3cret",
        )
        with TestClient(create_app(settings)) as test_client:
            yield test_client

    def test_write_without_token_is_401(self, secured_client: TestClient):
        resp = secured_client.post("/api/categories", json={"name": "Nope"})
        assert resp.status_code == 401

    def test_write_with_wrong_token_is_401(self, secured_client: TestClient):
        resp = secured_client.post(
            "/api/categories",
            json={"name": "Nope"},
            headers={"Authorization": "Bearer wrong"},
        )
        assert resp.status_code == 401

    def test_write_with_token_succeeds(self, secured_client: TestClient):
        resp = secured_client.post(
            "/api/categories",
            json={"name": "Yes"},
            headers={"Authorization": "Bearer s3cret"},
        )
        assert resp.status_code == 201

    def test_reads_are_open(self, secured_client: TestClient):
        assert secured_client.get("/api/categories").status_code == 200
        assert secured_client.get("/api/formulas/trending").status_code == 200
