import logging
import math
import re
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from pymongo import ReturnDocument

import database
import payments
from middleware import is_admin, require_sign_in
from schemas import Order as OrderSchema, Product as ProductSchema
from utils import (
    NEWEST_FIRST,
    PHOTO_EXCLUDED,
    ensure_object_id,
    envelope,
    failure,
    is_object_id,
    populate_category,
    serialize_doc,
    slugify,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/product", tags=["product"])

GET_PRODUCT_LIMIT = 12
PER_PAGE = 6
RELATED_LIMIT = 3
MAX_PHOTO_BYTES = 1_000_000


class FilterPayload(BaseModel):
    checked: List[str] = []
    radio: List[float] = []


class CartLine(BaseModel):
    quantity: int = 0
    price: float = 0
    productId: str


class PaymentPayload(BaseModel):
    nonce: Optional[str] = None
    cart: Dict[str, CartLine] = {}


def _blank(value, numeric: bool = False) -> bool:
    if value is None or value == "":
        return True
    if numeric:
        try:
            return float(value) == 0
        except (TypeError, ValueError):
            return False
    return False


def _to_price(value) -> float:
    price = float(value)
    if not math.isfinite(price):
        raise ValueError(f"Cast to Number failed for value {value!r} at path \"price\"")
    return price


def _validate_product_fields(name, description, price, category, quantity, photo_bytes) -> Optional[str]:
    if _blank(name):
        return "Name is Required"
    if _blank(description):
        return "Description is Required"
    if _blank(price, numeric=True):
        return "Price is Required"
    if _blank(category):
        return "Category is Required"
    if _blank(quantity, numeric=True):
        return "Quantity is Required"
    if photo_bytes is not None and len(photo_bytes) > MAX_PHOTO_BYTES:
        return "Photo is required and should be less than 1mb"
    return None


def _read_photo(photo: Optional[UploadFile]) -> Optional[bytes]:
    if photo is None or not photo.filename:
        return None
    return photo.file.read()


def _parse_shipping(value: Optional[str]) -> Optional[bool]:
    if value is None or value == "":
        return None
    return str(value).strip().lower() in ("1", "true", "yes", "on")


# ----- Admin: create / update / delete -----

@router.post("/create-product", dependencies=[Depends(is_admin)])
def create_product(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    shipping: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
):
    photo_bytes = _read_photo(photo)
    error = _validate_product_fields(name, description, price, category, quantity, photo_bytes)
    if error:
        return JSONResponse(status_code=400, content={"error": error})
    try:
        product = ProductSchema(
            name=name,
            slug=slugify(name),
            description=description,
            price=_to_price(price),
            category=ensure_object_id(category),
            quantity=int(quantity),
            shipping=_parse_shipping(shipping),
            photo={"data": photo_bytes, "contentType": photo.content_type} if photo_bytes is not None else None,
        )
        data = product.model_dump(exclude_none=True)
        data.setdefault("photo", {})
        product_id = database.create_document("product", data)
        created = database.collection("product").find_one({"_id": ensure_object_id(product_id)})
        return envelope(201, success=True, message="Product Created Successfully", products=created)
    except Exception as exc:
        logger.error("Error in creating product: %s", exc)
        return failure(500, "Error in creating product", exc)


@router.put("/update-product/{pid}", dependencies=[Depends(is_admin)])
def update_product(
    pid: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    shipping: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
):
    photo_bytes = _read_photo(photo)
    error = _validate_product_fields(name, description, price, category, quantity, photo_bytes)
    if error:
        return JSONResponse(status_code=400, content={"error": error})
    try:
        changes = {
            "name": name,
            "slug": slugify(name),
            "description": description,
            "price": _to_price(price),
            "category": ensure_object_id(category),
            "quantity": int(quantity),
            "updated_at": database.utcnow(),
        }
        shipping_flag = _parse_shipping(shipping)
        if shipping_flag is not None:
            changes["shipping"] = shipping_flag
        if photo_bytes is not None:
            changes["photo"] = {"data": photo_bytes, "contentType": photo.content_type}
        product = database.collection("product").find_one_and_update(
            {"_id": ensure_object_id(pid)},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not product:
            return failure(404, "Product not found")
        return envelope(200, success=True, message="Product Updated Successfully", products=product)
    except Exception as exc:
        logger.error("Error in Updte product: %s", exc)
        return failure(500, "Error in Updte product", exc)


@router.delete("/delete-product/{pid}", dependencies=[Depends(is_admin)])
def delete_product(pid: str):
    if not is_object_id(pid):
        return failure(400, "Invalid product ID")
    try:
        product = database.collection("product").find_one_and_delete({"_id": ensure_object_id(pid)}, projection=PHOTO_EXCLUDED)
        if not product:
            return failure(404, "Product not found")
        return envelope(200, success=True, message="Product Deleted successfully")
    except Exception as exc:
        logger.error("Error while deleting product: %s", exc)
        return failure(500, "Error while deleting product", exc)


# ----- Public reads -----

@router.get("/get-product")
def get_products():
    try:
        cursor = database.collection("product").find({}, PHOTO_EXCLUDED).sort(NEWEST_FIRST).limit(GET_PRODUCT_LIMIT)
        products = populate_category(cursor)
        return envelope(200, success=True, counTotal=len(products), message="ALlProducts ", products=products)
    except Exception as exc:
        logger.error("Erorr in getting products: %s", exc)
        return failure(500, "Erorr in getting products", exc)


@router.get("/get-product/{slug}")
def get_single_product(slug: str):
    try:
        product = database.collection("product").find_one({"slug": slug}, PHOTO_EXCLUDED)
        if product:
            product = populate_category([product])[0]
        return envelope(200, success=True, message="Single Product Fetched", product=product)
    except Exception as exc:
        logger.error("Eror while getitng single product: %s", exc)
        return failure(500, "Eror while getitng single product", exc)


@router.get("/product-photo/{pid}")
def product_photo(pid: str):
    if not is_object_id(pid):
        return failure(400, "Invalid product ID")
    try:
        product = database.collection("product").find_one({"_id": ensure_object_id(pid)}, {"photo": 1})
        if not product:
            return failure(404, "Product not found")
        photo = product.get("photo") or {}
        if not photo.get("data"):
            return failure(404, "Product photo not found")
        return Response(content=bytes(photo["data"]), media_type=photo.get("contentType"), status_code=200)
    except Exception as exc:
        logger.error("Erorr while getting photo: %s", exc)
        return failure(500, "Erorr while getting photo", exc)


@router.post("/product-filters")
def product_filters(body: FilterPayload):
    try:
        args = {}
        if body.checked:
            args["category"] = {"$in": [ensure_object_id(c) for c in body.checked]}
        if body.radio:
            args["price"] = {"$gte": body.radio[0], "$lte": body.radio[-1]}
        products = list(database.collection("product").find(args, PHOTO_EXCLUDED))
        return envelope(200, success=True, products=products)
    except Exception as exc:
        logger.error("Error WHile Filtering Products: %s", exc)
        return failure(400, "Error WHile Filtering Products", exc)


@router.get("/product-count")
def product_count():
    try:
        total = database.collection("product").count_documents({})
        return envelope(200, success=True, total=total)
    except Exception as exc:
        logger.error("Error in product count: %s", exc)
        return failure(400, "Error in product count", exc)


@router.get("/product-list/{page}")
def product_list(page: str = "1"):
    try:
        page_number = int(page) if page else 1
        products = list(
            database.collection("product")
            .find({}, PHOTO_EXCLUDED)
            .sort(NEWEST_FIRST)
            .skip((page_number - 1) * PER_PAGE)
            .limit(PER_PAGE)
        )
        return envelope(200, success=True, products=products)
    except Exception as exc:
        logger.error("error in per page ctrl: %s", exc)
        return failure(400, "error in per page ctrl", exc)


@router.get("/search/{keyword}")
def search_product(keyword: str):
    try:
        pattern = {"$regex": re.escape(keyword), "$options": "i"}
        results = database.collection("product").find(
            {"$or": [{"name": pattern}, {"description": pattern}]},
            PHOTO_EXCLUDED,
        )
        return JSONResponse(content=serialize_doc(list(results)))
    except Exception as exc:
        logger.error("Error In Search Product API: %s", exc)
        return failure(400, "Error In Search Product API", exc)


@router.get("/related-product/{pid}/{cid}")
def related_product(pid: str, cid: str):
    try:
        cursor = (
            database.collection("product")
            .find({"category": ensure_object_id(cid), "_id": {"$ne": ensure_object_id(pid)}}, PHOTO_EXCLUDED)
            .limit(RELATED_LIMIT)
        )
        return envelope(200, success=True, products=populate_category(cursor))
    except Exception as exc:
        logger.error("error while geting related product: %s", exc)
        return failure(400, "error while geting related product", exc)


@router.get("/product-category/{slug}")
def product_category(slug: str):
    try:
        category = database.collection("category").find_one({"slug": slug})
        products = []
        if category:
            products = list(database.collection("product").find({"category": category["_id"]}, PHOTO_EXCLUDED))
        for p in products:
            p["category"] = category
        return envelope(200, success=True, category=category, products=products)
    except Exception as exc:
        logger.error("Error While Getting products: %s", exc)
        return failure(400, "Error While Getting products", exc)


# ----- Checkout -----

@router.get("/braintree/token")
def braintree_token():
    try:
        token = payments.generate_client_token()
        return {"clientToken": token, "success": True}
    except payments.GatewayError as exc:
        logger.error("Braintree client token failed: %s", exc)
        return failure(500, str(exc))


@router.post("/braintree/payment")
def braintree_payment(body: PaymentPayload, auth: dict = Depends(require_sign_in)):
    amount = payments.cart_total({slug: line.model_dump() for slug, line in body.cart.items()})
    try:
        payment = payments.submit_sale(amount, body.nonce)
    except payments.GatewayError as exc:
        logger.error("Braintree sale failed: %s", exc)
        return failure(500, str(exc))

    try:
        product_ids = []
        for line in body.cart.values():
            product_ids.extend([ensure_object_id(line.productId)] * line.quantity)
        order = OrderSchema(
            products=product_ids,
            payment=payment,
            buyer=ensure_object_id(auth.get("_id")),
            status="Processing" if payment["success"] else "Not Process",
        )
        order_id = database.create_document("order", order)
        logger.info("Order %s recorded with status %s", order_id, order.status)

        if payment["success"]:
            products = database.collection("product")
            for line in body.cart.values():
                products.update_one(
                    {"_id": ensure_object_id(line.productId)},
                    {"$inc": {"quantity": -line.quantity}},
                )
        return {"ok": True}
    except Exception as exc:
        logger.error("Error in payment: %s", exc)
        return failure(500, "Error in payment", exc)
