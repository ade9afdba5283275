"""Error Hierarchy — status codes and response envelopes."""

from storefront.core.errors import (
    AccessDeniedError, DuplicateSubmissionError, ErrorCategory, ExternalServiceError,
    RecordValidationError, ResourceNotFoundError,
)


def test_http_statuses():
    assert AccessDeniedError().http_status == 403
    assert ResourceNotFoundError("Table", "x").http_status == 404
    assert RecordValidationError({"a": "bad"}).http_status == 400
    assert ExternalServiceError("svc", "down").http_status == 502


def test_record_validation_details():
    body = RecordValidationError({"email": "email is required"}).to_response()
    assert body["error"]["code"] == "RECORD_VALIDATION_ERROR"
    assert body["error"]["details"] == [{"field": "email", "message": "email is required"}]


def test_duplicate_submission_carries_success_flag():
    error = DuplicateSubmissionError("newsletter_signup")
    body = error.to_response()
    assert body["success"] is False
    assert body["error"]["context"]["form_id"] == "newsletter_signup"
    assert error.category == ErrorCategory.CONFLICT


def test_external_service_error_includes_upstream_payload():
    body = ExternalServiceError(
        "shopping-service", "nope", upstream_status=422, payload={"code": "X"},
        http_status=400,
    ).to_response()
    assert body["error"]["service"] == "shopping-service"
    assert body["error"]["upstream_status"] == 422
    assert body["error"]["upstream"] == {"code": "X"}
