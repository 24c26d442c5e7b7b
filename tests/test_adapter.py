import asyncio
import json

import pytest

from cashfree_gateway.adapter import GatewayAdapter, extract_order_id, is_verify_path, parse_body
from cashfree_gateway.config import Settings
from cashfree_gateway.errors import ValidationError

ORDER = {
    "orderId": "ORDER-100",
    "orderAmount": 1499.5,
    "customerName": "Ravi",
    "customerPhone": "9876543210",
}


class RecordingGateway:
    def __init__(self, result=None, error=None):
        self.result = result or {"order_id": "ORDER-100", "payment_session_id": "session_abc"}
        self.error = error
        self.calls = []

    async def create_order(self, credentials, payload):
        self.calls.append((credentials, payload))
        if self.error:
            raise self.error
        return self.result

    async def get_order(self, credentials, order_id):
        self.calls.append((credentials, order_id))
        if self.error:
            raise self.error
        return self.result


def make_adapter(gateway=None, **overrides):
    values = {"cashfree_app_id": "APPID123", "cashfree_secret_key": "secret_xyz"}
    values.update(overrides)
    return GatewayAdapter(Settings(**values), gateway or RecordingGateway())


def run(adapter, method, path, body=None):
    return asyncio.run(adapter.handle(method, path, body))


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/verify/O1", "O1"),
        ("/verify/O1/", "O1"),
        ("/O1/verify", "O1"),
        ("/O1/verify/", "O1"),
        ("/api/verify/ORDER-9", "ORDER-9"),
        ("/verify", None),
        ("/verify/", None),
        ("/orders", None),
    ],
)
def test_extract_order_id(path, expected):
    assert extract_order_id(path) == expected


def test_is_verify_path_matches_whole_segments():
    assert is_verify_path("/verify/O1")
    assert is_verify_path("/O1/verify")
    assert not is_verify_path("/verifyx/O1")
    assert not is_verify_path("/")


def test_parse_body_accepts_dicts_bytes_and_blank():
    assert parse_body({"a": 1}) == {"a": 1}
    assert parse_body(b'{"a": 1}') == {"a": 1}
    assert parse_body("") == {}
    assert parse_body(None) == {}


@pytest.mark.parametrize("body", ["{oops", "[1, 2]", "42"])
def test_parse_body_rejects_non_objects(body):
    with pytest.raises(ValidationError) as exc:
        parse_body(body)
    assert exc.value.status_code == 400


def test_create_order_builds_gateway_payload():
    gateway = RecordingGateway()
    adapter = make_adapter(gateway)

    result = run(adapter, "POST", "/", dict(ORDER, orderNote="Evening slot"))

    assert result.status_code == 200
    credentials, payload = gateway.calls[0]
    assert credentials.app_id == "APPID123"
    assert credentials.secret_key.get_secret_value() == "secret_xyz"
    assert payload == {
        "order_id": "ORDER-100",
        "order_amount": 1499.5,
        "order_currency": "INR",
        "customer_details": {
            "customer_id": "9876543210",
            "customer_name": "Ravi",
            "customer_email": "9876543210@buffbuddies.com",
            "customer_phone": "9876543210",
        },
        "order_meta": {
            "return_url": "https://buffbuddies.synthory.space/booking/success?order_id=ORDER-100",
        },
        "order_note": "Evening slot",
    }


def test_create_order_uses_given_email_and_default_note():
    gateway = RecordingGateway()

    run(make_adapter(gateway), "POST", "/", dict(ORDER, customerEmail="ravi@example.com"))

    _, payload = gateway.calls[0]
    assert payload["customer_details"]["customer_email"] == "ravi@example.com"
    assert payload["order_note"] == "Buff Buddies Booking"


def test_create_order_coerces_string_amount():
    gateway = RecordingGateway()

    run(make_adapter(gateway), "POST", "/", dict(ORDER, orderAmount="250.75"))

    _, payload = gateway.calls[0]
    assert payload["order_amount"] == 250.75
    assert isinstance(payload["order_amount"], float)


@pytest.mark.parametrize("amount", ["abc", -10, "-1", True])
def test_create_order_rejects_bad_amount(amount):
    gateway = RecordingGateway()

    result = run(make_adapter(gateway), "POST", "/", dict(ORDER, orderAmount=amount))

    assert result.status_code == 400
    assert result.payload == {"success": False, "error": "orderAmount must be a positive number"}
    assert gateway.calls == []


def test_zero_amount_counts_as_missing():
    result = run(make_adapter(), "POST", "/", dict(ORDER, orderAmount=0))

    assert result.status_code == 400
    assert result.payload["error"].startswith("Missing required fields")


def test_body_credentials_ignored_by_default():
    gateway = RecordingGateway()
    adapter = make_adapter(gateway, cashfree_app_id=None, cashfree_secret_key=None)

    result = run(adapter, "POST", "/", dict(ORDER, appId="BODYAPP", secretKey="body_secret"))

    assert result.status_code == 500
    assert gateway.calls == []


def test_body_credentials_used_when_enabled():
    gateway = RecordingGateway()
    adapter = make_adapter(
        gateway, cashfree_app_id=None, cashfree_secret_key=None, allow_body_credentials=True
    )

    result = run(adapter, "POST", "/", dict(ORDER, appId="BODYAPP", secretKey="body_secret"))

    assert result.status_code == 200
    credentials, _ = gateway.calls[0]
    assert credentials.app_id == "BODYAPP"


def test_unexpected_error_hides_details():
    adapter = make_adapter(RecordingGateway(error=RuntimeError("secret_xyz leaked")))

    result = run(adapter, "POST", "/", ORDER)

    assert result.status_code == 500
    assert result.payload == {"success": False, "error": "An unexpected error occurred. Please try again."}
    assert "secret_xyz" not in json.dumps(result.payload)


def test_verify_missing_order_id():
    gateway = RecordingGateway()

    result = run(make_adapter(gateway), "POST", "/verify/")

    assert result.status_code == 400
    assert result.payload == {"success": False, "error": "Order ID is required in path"}
    assert gateway.calls == []


def test_health_does_not_need_credentials():
    adapter = make_adapter(cashfree_app_id=None, cashfree_secret_key=None)

    result = run(adapter, "get", "/health")

    assert result.status_code == 200
    assert result.payload["success"] is True


def test_every_response_carries_cors_headers():
    adapter = make_adapter()

    for method, path in [("OPTIONS", "/"), ("GET", "/"), ("POST", "/"), ("DELETE", "/"), ("POST", "/verify/")]:
        result = run(adapter, method, path)
        assert result.headers["Access-Control-Allow-Origin"] == "*"
        assert result.headers["Access-Control-Allow-Methods"] == "POST, GET, OPTIONS"
        assert result.headers["Access-Control-Allow-Headers"] == "Content-Type"
