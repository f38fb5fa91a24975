"""
Braintree gateway wrapper.

The gateway handle is built on first use from configuration and shared by all
requests. Results are flattened to plain dicts so they can be stored on the
order document as received.
"""
import logging
from decimal import Decimal
from typing import Optional

import braintree
from braintree.exceptions.braintree_error import BraintreeError

from config import settings

logger = logging.getLogger(__name__)

_gateway = None

TRANSACTION_FIELDS = (
    "id",
    "status",
    "type",
    "amount",
    "currency_iso_code",
    "merchant_account_id",
    "payment_instrument_type",
    "processor_response_code",
    "processor_response_text",
    "created_at",
    "updated_at",
)


class GatewayError(Exception):
    """Transport or gateway-level failure; no result was produced."""


def get_gateway():
    global _gateway
    if _gateway is None:
        environment = (
            braintree.Environment.Production
            if settings.braintree_environment == "production"
            else braintree.Environment.Sandbox
        )
        _gateway = braintree.BraintreeGateway(
            braintree.Configuration(
                environment=environment,
                merchant_id=settings.braintree_merchant_id,
                public_key=settings.braintree_public_key,
                private_key=settings.braintree_private_key,
                wrap_http_exceptions=True,
            )
        )
    return _gateway


def generate_client_token() -> str:
    try:
        return get_gateway().client_token.generate()
    except BraintreeError as exc:
        raise GatewayError(str(exc) or exc.__class__.__name__) from exc


def _plain(value):
    if isinstance(value, Decimal):
        return str(value)
    return value


def transaction_to_dict(transaction) -> Optional[dict]:
    if transaction is None:
        return None
    return {field: _plain(getattr(transaction, field, None)) for field in TRANSACTION_FIELDS}


def result_to_dict(result) -> dict:
    data = {
        "success": bool(getattr(result, "is_success", False)),
        "transaction": transaction_to_dict(getattr(result, "transaction", None)),
    }
    message = getattr(result, "message", None)
    if message is not None:
        data["message"] = message
    errors = getattr(result, "errors", None)
    if errors is not None:
        data["errors"] = [
            {"attribute": e.attribute, "code": e.code, "message": e.message}
            for e in getattr(errors, "deep_errors", [])
        ]
    return data


def submit_sale(amount: str, nonce: str) -> dict:
    """Run a sale for `amount` and return the flattened gateway result, declined or not."""
    try:
        result = get_gateway().transaction.sale({
            "amount": amount,
            "payment_method_nonce": nonce,
            "options": {"submit_for_settlement": True},
        })
    except BraintreeError as exc:
        raise GatewayError(str(exc) or exc.__class__.__name__) from exc
    payment = result_to_dict(result)
    logger.info("Braintree sale of %s finished with success=%s", amount, payment["success"])
    return payment


def cart_total(cart: dict) -> str:
    total = 0
    for line in (cart or {}).values():
        total += float(line.get("price", 0)) * int(line.get("quantity", 0))
    return f"{total:.2f}"
