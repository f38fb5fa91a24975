import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from pymongo import ReturnDocument

import database
from middleware import is_admin
from schemas import Category as CategorySchema
from utils import ensure_object_id, envelope, failure, slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/category", tags=["category"])


class CategoryPayload(BaseModel):
    name: Optional[str] = None


def _is_duplicate(name: str, exclude_id: Optional[str] = None) -> bool:
    wanted = name.strip().lower()
    for cat in database.collection("category").find({}, {"name": 1}):
        if exclude_id is not None and str(cat["_id"]) == exclude_id:
            continue
        if str(cat.get("name", "")).lower() == wanted:
            return True
    return False


@router.post("/create-category", dependencies=[Depends(is_admin)])
def create_category(body: CategoryPayload):
    if not body.name or not body.name.strip():
        return failure(400, "Name is required")
    try:
        if _is_duplicate(body.name):
            return failure(409, "Category already exists")
        name = body.name.strip()
        category_id = database.create_document("category", CategorySchema(name=name, slug=slugify(name)))
        category = database.collection("category").find_one({"_id": ensure_object_id(category_id)})
        return envelope(201, success=True, message="New category created", category=category)
    except Exception as exc:
        logger.error("Error in category: %s", exc)
        return failure(500, "Error in category", exc)


@router.put("/update-category/{category_id}", dependencies=[Depends(is_admin)])
def update_category(category_id: str, body: CategoryPayload):
    if not body.name or not body.name.strip():
        return failure(400, "Name is required")
    try:
        if _is_duplicate(body.name, exclude_id=category_id):
            return failure(409, "Category already exists")
        name = body.name.strip()
        changes = CategorySchema(name=name, slug=slugify(name)).model_dump()
        category = database.collection("category").find_one_and_update(
            {"_id": ensure_object_id(category_id)},
            {"$set": {**changes, "updated_at": database.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if not category:
            return failure(404, "Category not found")
        return envelope(200, success=True, message="Category updated successfully", category=category)
    except Exception as exc:
        logger.error("Error while updating category: %s", exc)
        return failure(500, "Error while updating category", exc)


@router.get("/get-category")
def get_categories():
    try:
        categories = database.get_documents("category")
        return envelope(200, success=True, message="All Categories List", category=categories)
    except Exception as exc:
        logger.error("Error while getting all categories: %s", exc)
        return failure(500, "Error while getting all categories", exc)


@router.get("/single-category/{slug}")
def single_category(slug: str):
    try:
        category = database.collection("category").find_one({"slug": slug})
        if not category:
            return failure(404, "Category not found")
        return envelope(200, success=True, message="Get single category successfully", category=category)
    except Exception as exc:
        logger.error("Error while getting single category: %s", exc)
        return failure(500, "Error while getting single category", exc)


@router.delete("/delete-category/{category_id}", dependencies=[Depends(is_admin)])
def delete_category(category_id: str):
    try:
        oid = ensure_object_id(category_id)
        in_use = database.collection("product").count_documents({"category": oid})
        if in_use > 0:
            return failure(
                400,
                f"Cannot delete category. {in_use} product(s) are still using this category. "
                "Please reassign or delete those products first.",
            )
        category = database.collection("category").find_one_and_delete({"_id": oid})
        if not category:
            return failure(404, "Category not found")
        return envelope(200, success=True, message="Category deleted successfully")
    except Exception as exc:
        logger.error("Error while deleting category: %s", exc)
        return failure(500, "Error while deleting category", exc)
