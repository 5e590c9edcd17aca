from storefront.orders.errors import OperationResult, OrderOperationError, extract_message
from storefront.shared.clients import ApiError

import pytest


def test_prefers_backend_error_field():
    failure = ApiError("Request failed with status code 400", 400, {"error": "Validation failed"})
    assert extract_message(failure, "default") == "Validation failed"


def test_backend_error_may_be_structured():
    detail = {"message": "Validation failed", "details": ["Payment method is required"]}
    failure = ApiError("Request failed", 400, {"error": detail})
    assert extract_message(failure, "default") is detail


def test_falls_back_to_transport_message():
    assert extract_message(ApiError("timed out"), "default") == "timed out"


def test_empty_error_field_falls_back_to_message():
    failure = ApiError("Request failed with status code 500", 500, {"error": ""})
    assert extract_message(failure, "default") == "Request failed with status code 500"


def test_non_dict_body_is_ignored():
    failure = ApiError("Request failed with status code 502", 502, "<html>bad gateway</html>")
    assert extract_message(failure, "default") == "Request failed with status code 502"


def test_falls_back_to_default_text():
    assert extract_message(ApiError(), "Failed to fetch order") == "Failed to fetch order"


def test_plain_exceptions():
    assert extract_message(RuntimeError("boom"), "default") == "boom"
    assert extract_message(RuntimeError(), "default") == "default"


def test_operation_result_unwrap():
    assert OperationResult.fulfilled({"order": 1}).unwrap() == {"order": 1}

    with pytest.raises(OrderOperationError) as exc_info:
        OperationResult.rejected("Out of stock").unwrap()
    assert exc_info.value.reason == "Out of stock"
    assert str(exc_info.value) == "Out of stock"
