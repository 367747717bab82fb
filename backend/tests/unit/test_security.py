import json
import logging
from decimal import Decimal

from jose import jwt

from farmledger.config import settings
from farmledger.core.exceptions import InsufficientStockException
from farmledger.utils.logging import JsonFormatter
from farmledger.utils.security import create_access_token, decode_access_token


def test_access_token_round_trip() -> None:
    token = create_access_token(42)

    assert decode_access_token(token) == "42"


def test_expired_token_is_rejected() -> None:
    token = create_access_token(42, expires_minutes=-1)

    assert decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected() -> None:
    token = jwt.encode({"sub": "42", "type": "access"}, "some-other-key", algorithm=settings.ALGORITHM)

    assert decode_access_token(token) is None


def test_non_access_token_is_rejected() -> None:
    token = create_access_token(42, extra_claims={"type": "refresh"})

    assert decode_access_token(token) is None


def test_insufficient_stock_message_lists_each_shortage() -> None:
    exc = InsufficientStockException(
        [
            {"material_name": "A", "available": Decimal("4.00"), "required": Decimal("5")},
            {"material_name": "B", "available": Decimal("0"), "required": Decimal("1.50")},
        ]
    )

    assert exc.status_code == 409
    assert exc.code == "INSUFFICIENT_STOCK"
    assert exc.message == (
        "Insufficient stock for A. Available: 4, Required: 5; "
        "Insufficient stock for B. Available: 0, Required: 1.5"
    )


def test_json_formatter_promotes_extra_fields() -> None:
    record = logging.LogRecord("farmledger.test", logging.INFO, __file__, 1, "Inventory %s", ("sales",), None)
    record.material_id = 7
    record.delta = Decimal("2.50")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Inventory sales"
    assert payload["level"] == "INFO"
    assert payload["material_id"] == 7
    assert payload["delta"] == "2.50"
