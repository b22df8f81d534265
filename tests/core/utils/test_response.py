import base64
import json
from http import HTTPStatus
from typing import Any

from core.models.errors import (
    DecryptionError,
    ErrorKind,
    InvalidSizeParameterError,
    NotFoundError,
    StorageError,
)
from core.utils.response import KIND_STATUS, ResponseBuilder


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    return json.loads(resp["body"])


class TestResponseBuilder:
    def test_ok_includes_cors_headers(self) -> None:
        resp = ResponseBuilder.ok({"status": "healthy"})

        assert resp["statusCode"] == HTTPStatus.OK
        assert resp["headers"]["Content-Type"] == "application/json"
        assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
        assert parse_body(resp) == {"status": "healthy"}

    def test_created_with_request_id(self) -> None:
        resp = ResponseBuilder.created({"success": True}, request_id="req-1")

        assert resp["statusCode"] == HTTPStatus.CREATED
        assert parse_body(resp) == {"success": True, "request_id": "req-1"}

    def test_cors_origin_override(self) -> None:
        resp = ResponseBuilder.ok({}, cors_origin="https://example.com")

        assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"

    def test_error_envelope(self) -> None:
        resp = ResponseBuilder.error(
            status=HTTPStatus.BAD_REQUEST,
            message="Bad thing",
            error="SOME_CODE",
            details={"field": "size"},
        )

        body = parse_body(resp)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body["error"] == "SOME_CODE"
        assert body["message"] == "Bad thing"
        assert body["cause"] == "Bad thing"
        assert body["details"] == {"field": "size"}
        assert "timestamp" in body

    def test_error_without_details_omits_key(self) -> None:
        body = parse_body(ResponseBuilder.error(status=HTTPStatus.NOT_FOUND, message="gone"))

        assert "details" not in body
        assert body["error"] == "NOT_FOUND"

    def test_bad_request(self) -> None:
        resp = ResponseBuilder.bad_request("Invalid JSON body")

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert parse_body(resp)["error"] == "VALIDATION_ERROR"

    def test_json_response_custom_status(self) -> None:
        resp = ResponseBuilder.json_response(
            {"status": "error"}, status=HTTPStatus.INTERNAL_SERVER_ERROR
        )

        assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
        assert parse_body(resp) == {"status": "error"}

    def test_binary_response(self) -> None:
        content = b"\x89PNG-bytes"

        resp = ResponseBuilder.binary_response(content, content_type="image/png")

        assert resp["statusCode"] == HTTPStatus.OK
        assert resp["isBase64Encoded"] is True
        assert base64.b64decode(resp["body"]) == content
        assert resp["headers"]["Content-Type"] == "image/png"
        assert resp["headers"]["Content-Length"] == str(len(content))


class TestFromError:
    def test_every_kind_has_a_status(self) -> None:
        assert set(KIND_STATUS) == set(ErrorKind)

    def test_client_input_is_400(self) -> None:
        err = InvalidSizeParameterError(details={"reason": "nope", "stage": "syntax"})

        resp = ResponseBuilder.from_error(err, request_id="req-2")
        body = parse_body(resp)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body["error"] == err.error_code
        assert body["cause"] == "Invalid size parameter"
        assert body["details"] == {"reason": "nope", "stage": "syntax"}
        assert body["request_id"] == "req-2"

    def test_not_found_is_404(self) -> None:
        resp = ResponseBuilder.from_error(NotFoundError())

        assert resp["statusCode"] == HTTPStatus.NOT_FOUND

    def test_server_internal_is_500(self) -> None:
        resp = ResponseBuilder.from_error(StorageError(message="Unable to list objects"))

        assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR

    def test_decryption_error_is_generic(self) -> None:
        body = parse_body(ResponseBuilder.from_error(DecryptionError()))

        assert body["message"] == "Decryption failed"
        assert "details" not in body
