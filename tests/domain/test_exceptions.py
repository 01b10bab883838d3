from __future__ import annotations

from minter.domain.error_codes import ErrorCode, MintStage
from minter.domain.exceptions import BadResponseError, ConfigMissingError, PersistFailedError


def test_bad_response_carries_status_and_snippet():
    err = BadResponseError(503, "busy")

    assert str(err) == "BAD_RESPONSE: HTTP 503"
    assert err.retryable is True
    assert err.to_dict() == {
        "category": "transport",
        "code": "BAD_RESPONSE",
        "message": "HTTP 503",
        "retryable": True,
        "details": {"status_code": 503, "body_snippet": "busy"},
    }


def test_client_errors_are_not_marked_retryable():
    assert BadResponseError(400).retryable is False


def test_categories_follow_stage():
    assert ConfigMissingError("identifier.doi").category == "config"
    assert PersistFailedError("field_doi", "x", "boom").category == "write"
    assert ErrorCode.MALFORMED_RESPONSE.stage == MintStage.PARSE
    assert ErrorCode.UNEXPECTED_ERROR.stage == MintStage.UNKNOWN
