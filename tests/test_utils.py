import base64
from datetime import datetime, timezone

from bson import ObjectId

import seed
from utils import is_object_id, serialize_doc, slugify


def test_slugify_keeps_case_and_joins_words():
    assert slugify("Test Laptop") == "Test-Laptop"
    assert slugify("  Café   Crème ") == "Cafe-Creme"
    assert slugify("100% Cotton / T-Shirt") == "100-Cotton-T-Shirt"
    assert slugify("") == ""


def test_is_object_id():
    assert is_object_id(str(ObjectId()))
    assert is_object_id(ObjectId())
    assert not is_object_id("invalid-id")
    assert not is_object_id(None)


def test_serialize_doc_converts_bson_values():
    oid = ObjectId()
    when = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    doc = serialize_doc({"_id": oid, "tags": [oid], "created_at": when, "photo": {"data": b"\x00\x01"}})

    assert doc == {
        "_id": str(oid),
        "tags": [str(oid)],
        "created_at": "2024-01-02T03:04:05+00:00",
        "photo": {"data": base64.b64encode(b"\x00\x01").decode("ascii")},
    }


def test_seed_populates_once(mongo_db):
    product_ids = seed.populate()

    assert len(product_ids) == len(seed.PRODUCTS)
    assert mongo_db["user"].count_documents({"role": 1}) == 1
    assert mongo_db["category"].count_documents({}) == 3
    laptop = mongo_db["product"].find_one({"slug": "Laptop-Pro-15"})
    assert laptop["category"] == mongo_db["category"].find_one({"slug": "electronics"})["_id"]

    assert seed.populate() == []
    assert mongo_db["user"].count_documents({}) == 2


def test_health_reports_database(client, mongo_db):
    mongo_db["product"].insert_one({"name": "x"})

    res = client.get("/health")

    assert res.json()["backend"] == "ok"
    assert res.json()["database"] == "ok"
    assert "product" in res.json()["collections"]
