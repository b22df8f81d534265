"""
Lambda handler responsible for uploading one or more images.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.bootstrap import get_runtime
from core.utils.decorators import api_gateway_handler
from core.utils.keys import validate_prefix
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import UploadImagesRequest, UploadImagesResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    Route: POST /image/{prefix}

    Expected body:
    {
        "files": [
            {"file": "<base64>", "file_name": "a.png", "content_type": "image/png"}
        ]
    }
    A single ``"file": {...}`` object is accepted in place of ``files``.

    The batch is all-or-nothing: any invalid file fails the request and no
    image from it remains stored.

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response listing the stored images
    """
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    prefix = validate_prefix(path_params.get("prefix"))

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        logger.warning("Invalid JSON body received")
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    if not isinstance(body, dict):
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    try:
        request = validate_request(UploadImagesRequest, body)
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors(include_input=False)},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = UploadService(get_runtime())

    uploaded = service.upload_images(prefix=prefix, files=request.all_files())

    response = UploadImagesResponse(
        success=True,
        message=f"Successfully uploaded {len(uploaded)} file(s)",
        files=uploaded,
    )

    return ResponseBuilder.created(response.model_dump(by_alias=True))
