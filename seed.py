"""
Demo data for local development.

Populates one admin, one customer, three categories and a few products when
the user collection is empty. Enabled at start-up with SEED_DATABASE=true.
"""
import logging
from typing import List

import database
from auth_helper import hash_password
from schemas import Category, Product, User
from utils import ensure_object_id, slugify

logger = logging.getLogger(__name__)

ADMIN_USERS = [
    {
        "name": "Admin 1",
        "email": "admin1@email.com",
        "password": "password1",
        "phone": "1234567890",
        "address": "abc admin street 1",
        "answer": "admin 1",
        "role": 1,
    },
]

NORMAL_USERS = [
    {
        "name": "User 1",
        "email": "user1@email.com",
        "password": "password1",
        "phone": "1234567890",
        "address": "abc user street 1",
        "answer": "user 1",
        "role": 0,
    },
]

CATEGORIES = ["Electronics", "Books", "Clothing"]

PRODUCTS = [
    ("Laptop Pro 15", "High performance laptop with 16GB RAM and 512GB SSD", 1299.99, 10, "Electronics", True),
    ("Wireless Mouse", "Ergonomic wireless mouse with USB receiver", 29.99, 50, "Electronics", True),
    ("The Great Gatsby", "Classic American novel by F. Scott Fitzgerald", 12.99, 25, "Books", False),
    ("JavaScript Guide", "Comprehensive guide to modern JavaScript programming", 45.99, 15, "Books", False),
    ("Cotton T-Shirt", "Comfortable 100% cotton t-shirt in various colors", 19.99, 100, "Clothing", True),
    ("Denim Jeans", "Classic fit denim jeans", 59.99, 30, "Clothing", True),
]


def populate() -> List[str]:
    """Insert the demo documents; returns the ids of the created products."""
    if database.collection("user").count_documents({}) > 0:
        logger.info("Database already populated, skipping seed")
        return []

    for raw in ADMIN_USERS + NORMAL_USERS:
        user = User(**{**raw, "password": hash_password(raw["password"])})
        database.create_document("user", user)

    category_ids = {}
    for name in CATEGORIES:
        category_ids[name] = database.create_document("category", Category(name=name, slug=slugify(name)))

    product_ids = []
    for name, description, price, quantity, category_name, shipping in PRODUCTS:
        product = Product(
            name=name,
            slug=slugify(name),
            description=description,
            price=price,
            quantity=quantity,
            category=ensure_object_id(category_ids[category_name]),
            shipping=shipping,
        )
        product_ids.append(database.create_document("product", product.model_dump(exclude_none=True)))

    logger.info("Seeded %d users, %d categories, %d products",
                len(ADMIN_USERS) + len(NORMAL_USERS), len(category_ids), len(product_ids))
    return product_ids
