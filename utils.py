import base64
import re
import unicodedata
from datetime import datetime
from typing import Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi.responses import JSONResponse

import database

PHOTO_EXCLUDED = {"photo": 0}
NEWEST_FIRST = [("created_at", -1), ("_id", -1)]


def slugify(name: str, max_len: int = 200) -> str:
    """URL slug that keeps the original letter case, e.g. "Test Laptop" -> "Test-Laptop"."""
    norm = unicodedata.normalize("NFKD", (name or "").strip())
    chars = []
    for ch in norm:
        if unicodedata.category(ch) == "Mn":
            continue
        if ord(ch) < 128:
            chars.append(ch)
    s = "".join(chars)
    s = re.sub(r"\s+", "-", s)
    s = re.sub(r"[^A-Za-z0-9\-_.~]", "", s)
    s = re.sub(r"-{2,}", "-", s).strip("-")
    return s[:max_len] if len(s) > max_len else s


def ensure_object_id(id_str) -> ObjectId:
    """Parse a 24-hex id; raises bson InvalidId/TypeError for anything else."""
    if isinstance(id_str, ObjectId):
        return id_str
    return ObjectId(id_str)


def is_object_id(id_str) -> bool:
    try:
        ensure_object_id(id_str)
    except (InvalidId, TypeError):
        return False
    return True


def serialize_doc(value):
    """Make a Mongo document JSON-safe: ObjectIds to str, datetimes to ISO, bytes to base64."""
    if isinstance(value, dict):
        return {k: serialize_doc(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_doc(v) for v in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    return value


def envelope(status_code: int, **content) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=serialize_doc(content))


def failure(status_code: int, message: str, exc: Optional[Exception] = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if exc is not None:
        content["error"] = str(exc)
    return JSONResponse(status_code=status_code, content=content)


def without_fields(doc: Optional[dict], *fields: str) -> Optional[dict]:
    if doc is None:
        return None
    return {k: v for k, v in doc.items() if k not in fields}


# ----- populate helpers -----

def populate_category(products: Iterable[dict]) -> List[dict]:
    products = list(products)
    ids = {p["category"] for p in products if isinstance(p.get("category"), ObjectId)}
    if not ids:
        return products
    categories = {c["_id"]: c for c in database.collection("category").find({"_id": {"$in": list(ids)}})}
    for p in products:
        cid = p.get("category")
        if cid in categories:
            p["category"] = categories[cid]
    return products


def populate_orders(orders: Iterable[dict]) -> List[dict]:
    """Replace product ids with product documents (no photo) and buyer id with {_id, name}."""
    orders = list(orders)
    product_ids = {pid for o in orders for pid in o.get("products", [])}
    buyer_ids = {o["buyer"] for o in orders if o.get("buyer") is not None}

    products = {}
    if product_ids:
        cursor = database.collection("product").find({"_id": {"$in": list(product_ids)}}, PHOTO_EXCLUDED)
        products = {p["_id"]: p for p in cursor}
    buyers = {}
    if buyer_ids:
        cursor = database.collection("user").find({"_id": {"$in": list(buyer_ids)}}, {"name": 1})
        buyers = {u["_id"]: u for u in cursor}

    for o in orders:
        o["products"] = [products[pid] for pid in o.get("products", []) if pid in products]
        o["buyer"] = buyers.get(o.get("buyer"))
    return orders
