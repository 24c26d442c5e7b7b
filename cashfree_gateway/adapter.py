"""Routes function requests to the Cashfree orders API.

Every call to `GatewayAdapter.handle` produces exactly one `AdapterResponse`
carrying the CORS header set; gateway errors never escape to the host.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import quote

import pydantic

from cashfree_gateway.config import Settings
from cashfree_gateway.errors import (
    ConfigurationError,
    GatewayError,
    NetworkError,
    RouteNotFoundError,
    UpstreamError,
    ValidationError,
)
from cashfree_gateway.logging_config import logger
from cashfree_gateway.models import AdapterResponse, Credentials, GatewayOrderResult, OrderRequest

REQUIRED_FIELDS = ("orderId", "orderAmount", "customerName", "customerPhone")
VERIFY_SEGMENT = "verify"


class GatewayAdapter:
    def __init__(self, settings: Settings, client):
        self.settings = settings
        self.client = client

    async def handle(self, method: str, path: Optional[str], body: Any = None) -> AdapterResponse:
        method = (method or "").upper()
        path = path or "/"
        logger.info("incoming_request", extra={"method": method, "path": path, "has_body": bool(body)})

        try:
            if method == "OPTIONS":
                return AdapterResponse(status_code=200, payload={"ok": True})
            if method == "GET":
                return self.health()
            if method == "POST" and is_verify_path(path):
                return await self.verify_order(path, body)
            if method == "POST":
                return await self.create_order(body)
            raise RouteNotFoundError("Invalid route. Use POST for payment operations.")
        except GatewayError as exc:
            logger.error("request_failed", extra={"error_type": type(exc).__name__, "status_code": exc.status_code})
            return AdapterResponse.failure(exc.message, exc.status_code)
        except Exception:
            logger.exception("unexpected_error")
            return AdapterResponse.failure("An unexpected error occurred. Please try again.", 500)

    def health(self) -> AdapterResponse:
        return AdapterResponse.ok(
            message="Cashfree payment function is running",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    def resolve_credentials(self, data: Optional[Dict[str, Any]] = None) -> Credentials:
        app_id = self.settings.cashfree_app_id
        secret_key = self.settings.cashfree_secret_key
        if self.settings.allow_body_credentials and data:
            app_id = app_id or data.get("appId")
            secret_key = secret_key or data.get("secretKey")

        logger.info(
            "credentials_check",
            extra={
                "has_app_id": bool(app_id),
                "has_secret_key": bool(secret_key),
                "app_id_prefix": str(app_id)[:5] if app_id else "missing",
            },
        )
        if not app_id or not secret_key:
            raise ConfigurationError(
                "Cashfree credentials not configured. Please add CASHFREE_APP_ID and "
                "CASHFREE_SECRET_KEY as environment variables."
            )
        return Credentials(app_id=str(app_id), secret_key=str(secret_key))

    async def create_order(self, body: Any) -> AdapterResponse:
        data = parse_body(body)
        credentials = self.resolve_credentials(data)
        order = validate_order(data)

        logger.info(
            "creating_order",
            extra={"order_id": order.order_id, "amount": order.order_amount, "app_id_prefix": credentials.app_id_prefix},
        )
        try:
            result = await self.client.create_order(credentials, self.build_order_payload(order))
        except UpstreamError as exc:
            raise UpstreamError(
                exc.upstream_message or "Failed to create payment order with Cashfree",
                upstream_status=exc.upstream_status,
                upstream_message=exc.upstream_message,
            ) from exc

        created = GatewayOrderResult.from_upstream(result)
        logger.info("order_created", extra={"order_id": created.order_id})
        return AdapterResponse.ok(paymentSessionId=created.payment_session_id, orderId=created.order_id)

    async def verify_order(self, path: str, body: Any) -> AdapterResponse:
        order_id = extract_order_id(path)
        if not order_id:
            raise ValidationError("Order ID is required in path")

        data = parse_body(body) if self.settings.allow_body_credentials else None
        credentials = self.resolve_credentials(data)

        logger.info("verifying_order", extra={"order_id": order_id})
        try:
            result = await self.client.get_order(credentials, order_id)
        except UpstreamError as exc:
            raise UpstreamError("Payment verification failed", upstream_status=exc.upstream_status) from exc
        except NetworkError as exc:
            raise NetworkError("Failed to verify payment. Please try again.") from exc

        status = GatewayOrderResult.from_upstream(result)
        logger.info(
            "order_verified",
            extra={"order_id": status.order_id, "order_status": status.order_status, "amount": status.order_amount},
        )
        return AdapterResponse.ok(
            order_status=status.order_status,
            order_amount=status.order_amount,
            cf_order_id=status.cf_order_id,
            transactionId=status.order_id,
        )

    def build_order_payload(self, order: OrderRequest) -> Dict[str, Any]:
        return {
            "order_id": order.order_id,
            "order_amount": order.order_amount,
            "order_currency": "INR",
            "customer_details": {
                "customer_id": order.customer_phone,
                "customer_name": order.customer_name,
                "customer_email": order.customer_email
                or f"{order.customer_phone}@{self.settings.customer_email_domain}",
                "customer_phone": order.customer_phone,
            },
            "order_meta": {
                "return_url": (
                    f"https://{self.settings.app_domain}/booking/success"
                    f"?order_id={quote(order.order_id, safe='')}"
                ),
            },
            "order_note": order.order_note or self.settings.default_order_note,
        }


def parse_body(body: Any) -> Dict[str, Any]:
    if body is None:
        return {}
    if isinstance(body, dict):
        return body
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        if not body.strip():
            return {}
        try:
            data = json.loads(body)
        except ValueError:
            logger.error("invalid_request_body")
            raise ValidationError("Invalid request body. Expected JSON.")
        if isinstance(data, dict):
            return data
    raise ValidationError("Invalid request body. Expected JSON.")


def validate_order(data: Dict[str, Any]) -> OrderRequest:
    if not all(data.get(field) for field in REQUIRED_FIELDS):
        logger.error("missing_required_fields")
        raise ValidationError("Missing required fields: " + ", ".join(REQUIRED_FIELDS))
    try:
        return OrderRequest.model_validate(data)
    except pydantic.ValidationError as exc:
        invalid = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
        if "orderAmount" in invalid:
            raise ValidationError("orderAmount must be a positive number") from exc
        raise ValidationError("Invalid order fields: " + ", ".join(sorted(invalid))) from exc


def path_segments(path: str):
    return [segment for segment in path.split("/") if segment]


def is_verify_path(path: str) -> bool:
    return VERIFY_SEGMENT in path_segments(path)


def extract_order_id(path: str) -> Optional[str]:
    """Return the id next to the last `verify` segment.

    `/verify/{id}` is preferred; `/{id}/verify` is accepted as a fallback.
    """

    segments = path_segments(path)
    if VERIFY_SEGMENT not in segments:
        return None
    index = len(segments) - 1 - segments[::-1].index(VERIFY_SEGMENT)
    if index + 1 < len(segments):
        return segments[index + 1]
    if index > 0:
        return segments[index - 1]
    return None
