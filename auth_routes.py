import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel
from pymongo import ReturnDocument

import database
from auth_helper import compare_password, hash_password, issue_token
from middleware import is_admin, require_sign_in
from schemas import ORDER_STATUSES, User as UserSchema
from utils import NEWEST_FIRST, ensure_object_id, envelope, failure, populate_orders, serialize_doc, without_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


# Payloads
class RegisterPayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    answer: Optional[str] = None


class LoginPayload(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordPayload(BaseModel):
    email: Optional[str] = None
    answer: Optional[str] = None
    newPassword: Optional[str] = None


class ProfilePayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class OrderStatusPayload(BaseModel):
    status: Optional[str] = None


REGISTER_FIELDS = (
    ("name", "Name is Required"),
    ("email", "Email is Required"),
    ("password", "Password is Required"),
    ("phone", "Phone number is Required"),
    ("address", "Address is Required"),
    ("answer", "Answer is Required"),
)


@router.post("/register")
def register(body: RegisterPayload):
    for field, message in REGISTER_FIELDS:
        if not getattr(body, field):
            return JSONResponse(status_code=400, content={"error": message})
    try:
        users = database.collection("user")
        if users.find_one({"email": body.email.strip().lower()}):
            return JSONResponse(status_code=200, content={"success": False, "message": "Already Register please login"})
        user = UserSchema(
            name=body.name,
            email=body.email,
            password=hash_password(body.password),
            phone=body.phone,
            address=body.address,
            answer=body.answer,
        )
        user_id = database.create_document("user", user)
        created = users.find_one({"_id": ensure_object_id(user_id)})
        return envelope(201, success=True, message="User Register Successfully", user=created)
    except Exception as exc:
        logger.error("Error in Registration: %s", exc)
        return failure(500, "Error in Registration", exc)


@router.post("/login")
def login(body: LoginPayload):
    if not body.email or not body.password:
        return failure(404, "Invalid email or password")
    try:
        user = database.collection("user").find_one({"email": body.email.strip().lower()})
        if not user:
            return failure(404, "Email is not registered")
        if not compare_password(body.password, user.get("password")):
            return failure(401, "Invalid Password")
        token = issue_token(user["_id"])
        return envelope(
            200,
            success=True,
            message="login successfully",
            user={
                "_id": user["_id"],
                "name": user.get("name"),
                "email": user.get("email"),
                "phone": user.get("phone"),
                "address": user.get("address"),
                "role": user.get("role", 0),
            },
            token=token,
        )
    except Exception as exc:
        logger.error("Error in login: %s", exc)
        return failure(500, "Error in login", exc)


@router.post("/forgot-password")
def forgot_password(body: ForgotPasswordPayload):
    if not body.email:
        return JSONResponse(status_code=400, content={"message": "Email is required"})
    if not body.answer:
        return JSONResponse(status_code=400, content={"message": "Answer is required"})
    if not body.newPassword:
        return JSONResponse(status_code=400, content={"message": "New Password is required"})
    try:
        users = database.collection("user")
        user = users.find_one({"email": body.email.strip().lower(), "answer": body.answer})
        if not user:
            return failure(404, "Wrong Email Or Answer")
        users.update_one({"_id": user["_id"]}, {"$set": {"password": hash_password(body.newPassword)}})
        return envelope(200, success=True, message="Password Reset Successfully")
    except Exception as exc:
        logger.error("Error in forgot password: %s", exc)
        return failure(500, "Something went wrong", exc)


@router.get("/test", dependencies=[Depends(is_admin)])
def test_controller():
    return PlainTextResponse("Protected Routes")


@router.get("/user-auth", dependencies=[Depends(require_sign_in)])
def user_auth():
    return {"ok": True}


@router.get("/admin-auth", dependencies=[Depends(is_admin)])
def admin_auth():
    return {"ok": True}


@router.put("/profile")
def update_profile(body: ProfilePayload, auth: dict = Depends(require_sign_in)):
    if body.password and len(body.password) < 6:
        return JSONResponse(status_code=200, content={"error": "Passsword is required and 6 character long"})
    try:
        users = database.collection("user")
        user_id = ensure_object_id(auth.get("_id"))
        user = users.find_one({"_id": user_id})
        if not user:
            return failure(404, "User not found")
        changes = {
            "name": body.name or user.get("name"),
            "password": hash_password(body.password) if body.password else user.get("password"),
            "phone": body.phone or user.get("phone"),
            "address": body.address or user.get("address"),
        }
        updated = users.find_one_and_update(
            {"_id": user_id},
            {"$set": {**changes, "updated_at": database.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        return envelope(200, success=True, message="Profile Updated Successfully", updatedUser=updated)
    except Exception as exc:
        logger.error("Error While Update profile: %s", exc)
        return failure(500, "Error While Update profile", exc)


# ----- Orders -----

@router.get("/orders")
def get_orders(auth: dict = Depends(require_sign_in)):
    try:
        buyer = ensure_object_id(auth.get("_id"))
        orders = database.collection("order").find({"buyer": buyer})
        return JSONResponse(content=serialize_doc(populate_orders(orders)))
    except Exception as exc:
        logger.error("Error While Getting Orders: %s", exc)
        return failure(500, "Error While Getting Orders", exc)


@router.get("/all-orders", dependencies=[Depends(is_admin)])
def get_all_orders():
    try:
        orders = database.collection("order").find({}).sort(NEWEST_FIRST)
        return JSONResponse(content=serialize_doc(populate_orders(orders)))
    except Exception as exc:
        logger.error("Error While Getting Orders: %s", exc)
        return failure(500, "Error While Getting Orders", exc)


@router.put("/order-status/{order_id}", dependencies=[Depends(is_admin)])
def order_status(order_id: str, body: OrderStatusPayload):
    if body.status not in ORDER_STATUSES:
        return failure(400, "Invalid order status")
    try:
        order = database.collection("order").find_one_and_update(
            {"_id": ensure_object_id(order_id)},
            {"$set": {"status": body.status, "updated_at": database.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if not order:
            return failure(404, "Order not found")
        return JSONResponse(content=serialize_doc(order))
    except Exception as exc:
        logger.error("Error While Updating Order: %s", exc)
        return failure(500, "Error While Updating Order", exc)


@router.get("/all-users", dependencies=[Depends(is_admin)])
def get_all_users():
    try:
        users = database.collection("user").find({}).sort(NEWEST_FIRST)
        return JSONResponse(content=serialize_doc([without_fields(u, "password", "answer") for u in users]))
    except Exception as exc:
        logger.error("Error while getting users: %s", exc)
        return failure(500, "Error while getting users", exc)
