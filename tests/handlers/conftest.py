import base64
import json
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def use_runtime(monkeypatch, runtime):
    """Make every handler use the in-memory runtime instead of S3."""
    for module in (
        "handlers.get_image.handler",
        "handlers.upload_image.handler",
        "handlers.health_check.handler",
    ):
        monkeypatch.setattr(f"{module}.get_runtime", lambda: runtime)

    return runtime


@pytest.fixture
def get_image_event() -> dict[str, Any]:
    return {
        "httpMethod": "GET",
        "path": "/image",
        "pathParameters": None,
        "queryStringParameters": {},
        "headers": {},
    }


@pytest.fixture
def upload_image_event(sample_png_binary) -> dict[str, Any]:
    return {
        "httpMethod": "POST",
        "path": "/image/dogs",
        "pathParameters": {"prefix": "dogs"},
        "body": json.dumps(
            {
                "files": [
                    {
                        "file": base64.b64encode(sample_png_binary).decode("utf-8"),
                        "file_name": "rex.png",
                    }
                ]
            }
        ),
        "headers": {"Content-Type": "application/json"},
    }


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    return json.loads(body) if body else {}


@pytest.fixture
def body_of():
    return parse_body
