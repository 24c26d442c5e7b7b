import math
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class OrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order_id: str = Field(alias="orderId", min_length=1)
    order_amount: float = Field(alias="orderAmount")
    customer_name: str = Field(alias="customerName")
    customer_phone: str = Field(alias="customerPhone")
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    order_note: Optional[str] = Field(default=None, alias="orderNote")

    @field_validator("order_id", "customer_name", "customer_phone", mode="before")
    @classmethod
    def coerce_to_str(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("order_amount", mode="before")
    @classmethod
    def reject_bool_amount(cls, value):
        if isinstance(value, bool):
            raise ValueError("orderAmount must be a positive number")
        return value

    @field_validator("order_amount")
    @classmethod
    def positive_amount(cls, value: float) -> float:
        if not math.isfinite(value) or value <= 0:
            raise ValueError("orderAmount must be a positive number")
        return value


class Credentials(BaseModel):
    app_id: str
    secret_key: SecretStr

    @property
    def app_id_prefix(self) -> str:
        return self.app_id[:5]


class GatewayOrderResult(BaseModel):
    order_id: Optional[str] = None
    payment_session_id: Optional[str] = None
    cf_order_id: Optional[Any] = None
    order_status: Optional[str] = None
    order_amount: Optional[Any] = None

    @classmethod
    def from_upstream(cls, data: Dict[str, Any]) -> "GatewayOrderResult":
        return cls(
            order_id=data.get("order_id"),
            payment_session_id=data.get("payment_session_id"),
            cf_order_id=data.get("cf_order_id"),
            order_status=data.get("order_status"),
            order_amount=data.get("order_amount"),
        )


class AdapterResponse(BaseModel):
    """Envelope plus the HTTP status and headers it is sent with."""

    status_code: int = 200
    payload: Dict[str, Any]
    headers: Dict[str, str] = Field(default_factory=lambda: dict(CORS_HEADERS))

    @classmethod
    def ok(cls, **fields) -> "AdapterResponse":
        return cls(status_code=200, payload={"success": True, **fields})

    @classmethod
    def failure(cls, message: str, status_code: int) -> "AdapterResponse":
        return cls(status_code=status_code, payload={"success": False, "error": message})
