"""
Lambda handler responsible for serving images, optionally resized.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.bootstrap import get_runtime
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import GetImageRequest
from .service import GetService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image retrieval requests.

    Supported routes:
    - GET /image?key=<encrypted reference>[&size=WxH]
    - GET /image/{prefix}/{rest+}[?size=WxH]

    Without ``size`` the original is returned; with it, the cached or newly
    created resized variant.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        Binary API Gateway response with the image bytes.
    """
    logger.info(
        "Received image request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    try:
        request = validate_request(
            GetImageRequest,
            {
                "key": query_params.get("key"),
                "path": path_params.get("proxy"),
                "size": query_params.get("size"),
            },
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors(include_input=False)},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = GetService(get_runtime())

    image = service.get_image(
        token=request.key,
        path=request.path,
        size=request.size,
    )

    return ResponseBuilder.binary_response(
        image.data,
        content_type=image.content_type,
    )
