"""
Lambda handler for the service health check.
"""

from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.bootstrap import get_runtime
from core.models.errors import HealthCheckFailedError
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder

from .service import HealthCheckService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle GET /health-check.

    Returns 200 with the passed checks, or 500 with
    ``{"status": "error", ...}`` when the store or image processing fails.
    """
    service = HealthCheckService(get_runtime())

    try:
        checks = service.check()
    except HealthCheckFailedError as exc:
        return ResponseBuilder.json_response(
            {
                "status": "error",
                "message": "Health check failed",
                "error": exc.details.get("reason", exc.message),
            },
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    logger.debug("Health check passed", extra={"checks": checks})
    return ResponseBuilder.ok(
        {
            "status": "healthy",
            "message": "Image service is fully operational",
            "checks": checks,
        }
    )
