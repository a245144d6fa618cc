from fastapi.testclient import TestClient

from shopfloor.main import app
from shopfloor.models.field_definition import FieldDefinition
from tests.helpers import add_field, create_article, weight_article


def article_payload(**overrides):
    payload = {
        "name": "Tablet 500mg 101",
        "organization": "PharmaCorp International",
        "status": "active",
        "attribute_fields": [
            {"key": "supplier", "label": "Supplier", "field_type": "text", "scope": "attribute"},
        ],
        "shop_floor_fields": [
            {
                "key": "weight",
                "label": "Weight",
                "field_type": "number",
                "scope": "shop_floor",
                "validation": {"required": True, "min": 10, "max": 100},
            },
            {
                "key": "quality",
                "label": "Quality",
                "field_type": "select",
                "scope": "shop_floor",
                "validation": {"options": ["Pass", "Fail"]},
            },
        ],
    }
    payload.update(overrides)
    return payload


def test_create_article_with_fields(db_session):
    """Test creating an article persists both schema scopes in order"""
    client = TestClient(app)
    r = client.post("/articles", json=article_payload())
    assert r.status_code == 201
    data = r.json()
    assert data["name"] == "Tablet 500mg 101"
    assert data["status"] == "active"
    assert [f["key"] for f in data["attribute_fields"]] == ["supplier"]
    assert [f["key"] for f in data["shop_floor_fields"]] == ["weight", "quality"]

    weight = data["shop_floor_fields"][0]
    assert weight["validation"] == {"required": True, "min": 10.0, "max": 100.0, "options": None}
    assert data["attribute_fields"][0]["validation"] is None


def test_create_article_requires_name_and_organization(db_session):
    client = TestClient(app)
    r = client.post("/articles", json=article_payload(name=""))
    assert r.status_code == 422
    r = client.post("/articles", json={"name": "X"})
    assert r.status_code == 422


def test_create_article_rejects_unknown_field_type(db_session):
    client = TestClient(app)
    payload = article_payload(
        shop_floor_fields=[{"key": "d", "label": "Date", "field_type": "date", "scope": "shop_floor"}]
    )
    r = client.post("/articles", json=payload)
    assert r.status_code == 422


def test_create_article_duplicate_keys_conflict(db_session):
    client = TestClient(app)
    payload = article_payload(
        attribute_fields=[{"key": "weight", "label": "Nominal weight", "field_type": "number", "scope": "attribute"}]
    )
    r = client.post("/articles", json=payload)
    assert r.status_code == 409
    assert r.json()["detail"]["keys"] == ["weight"]


def test_get_article_by_id(db_session):
    a = weight_article(db_session)
    client = TestClient(app)
    r = client.get(f"/articles/{a.id}")
    assert r.status_code == 200
    data = r.json()
    assert data["id"] == a.id
    assert [f["key"] for f in data["shop_floor_fields"]] == ["weight", "quality"]
    assert [f["key"] for f in data["attribute_fields"]] == ["supplier"]


def test_get_article_not_found(db_session):
    client = TestClient(app)
    r = client.get("/articles/9999")
    assert r.status_code == 404


def test_list_articles_filters(db_session):
    create_article(db_session, name="Steel Shaft 1", organization="SteelWorks", status="active")
    create_article(db_session, name="Brake Kit 2", organization="SteelWorks", status="draft")
    create_article(db_session, name="Tablet 3", organization="PharmaCorp", status="active")

    client = TestClient(app)
    r = client.get("/articles")
    assert r.status_code == 200
    body = r.json()
    assert body["pagination"]["total"] == 3
    assert len(body["items"]) == 3

    r = client.get("/articles?organization=SteelWorks")
    assert {a["name"] for a in r.json()["items"]} == {"Steel Shaft 1", "Brake Kit 2"}

    r = client.get("/articles?status=active&organization=SteelWorks")
    assert [a["name"] for a in r.json()["items"]] == ["Steel Shaft 1"]

    r = client.get("/articles?search=shaft")
    assert [a["name"] for a in r.json()["items"]] == ["Steel Shaft 1"]


def test_list_articles_invalid_status(db_session):
    client = TestClient(app)
    r = client.get("/articles?status=deleted")
    assert r.status_code == 422


def test_list_articles_pagination(db_session):
    for i in range(5):
        create_article(db_session, name=f"Part {i}")

    client = TestClient(app)
    r = client.get("/articles?limit=2&offset=0")
    page = r.json()
    assert len(page["items"]) == 2
    assert page["pagination"] == {"total": 5, "limit": 2, "offset": 0, "has_more": True}

    r = client.get("/articles?limit=2&offset=4")
    page = r.json()
    assert len(page["items"]) == 1
    assert page["pagination"]["has_more"] is False


def test_search_records_postgres_latency(db_session):
    create_article(db_session, name="Steel Shaft 1")
    client = TestClient(app)

    client.get("/articles")
    assert app.state.metrics.aggregate("postgres-search")["count"] == 0

    client.get("/articles?search=steel")
    client.get("/articles?search=brake")
    assert app.state.metrics.aggregate("postgres-search")["count"] == 2


def test_update_article_details(db_session):
    a = weight_article(db_session)
    client = TestClient(app)
    r = client.patch(f"/articles/{a.id}", json={"name": "Renamed", "status": "archived"})
    assert r.status_code == 200
    data = r.json()
    assert data["name"] == "Renamed"
    assert data["status"] == "archived"
    assert data["organization"] == a.organization
    # schema untouched when no field list is sent
    assert [f["key"] for f in data["shop_floor_fields"]] == ["weight", "quality"]


def test_update_article_replaces_only_given_scope(db_session):
    a = weight_article(db_session)
    weight = next(f for f in a.fields if f.key == "weight")

    client = TestClient(app)
    r = client.patch(
        f"/articles/{a.id}",
        json={
            "shop_floor_fields": [
                {
                    "id": weight.id,
                    "key": "weight",
                    "label": "Net Weight",
                    "field_type": "number",
                    "scope": "shop_floor",
                    "validation": {"required": True, "min": 20},
                },
                {"key": "operator", "label": "Operator", "field_type": "text", "scope": "shop_floor"},
            ]
        },
    )
    assert r.status_code == 200
    data = r.json()
    shop = data["shop_floor_fields"]
    assert [f["key"] for f in shop] == ["weight", "operator"]
    assert shop[0]["id"] == weight.id
    assert shop[0]["label"] == "Net Weight"
    assert shop[0]["validation"]["min"] == 20.0
    assert shop[0]["validation"]["max"] is None
    # quality was dropped, attribute scope kept
    assert [f["key"] for f in data["attribute_fields"]] == ["supplier"]
    assert db_session.query(FieldDefinition).filter(FieldDefinition.key == "quality").count() == 0


def test_update_article_can_reuse_removed_key(db_session):
    a = weight_article(db_session)
    client = TestClient(app)
    r = client.patch(
        f"/articles/{a.id}",
        json={"shop_floor_fields": [{"key": "quality", "label": "Grade", "field_type": "text", "scope": "shop_floor"}]},
    )
    assert r.status_code == 200
    shop = r.json()["shop_floor_fields"]
    assert [(f["key"], f["field_type"]) for f in shop] == [("quality", "text")]


def test_update_article_not_found(db_session):
    client = TestClient(app)
    r = client.patch("/articles/9999", json={"name": "X"})
    assert r.status_code == 404


def test_delete_article(db_session):
    a = create_article(db_session)
    add_field(db_session, a, key="weight", field_type="number")
    client = TestClient(app)

    r = client.delete(f"/articles/{a.id}")
    assert r.status_code == 200
    assert r.json() == {"success": True}

    assert client.get(f"/articles/{a.id}").status_code == 404
    assert db_session.query(FieldDefinition).count() == 0
    assert client.delete(f"/articles/{a.id}").status_code == 404
