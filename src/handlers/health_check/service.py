"""Health check: store connectivity plus a resize of the health check image."""

from aws_lambda_powertools import Logger

from core.bootstrap import Runtime
from core.models.errors import HealthCheckFailedError, ImageServiceError
from core.models.size import SizeSpec
from core.utils.constants import HEALTH_CHECK_RESIZE_SIZE

logger = Logger(UTC=True)


class HealthCheckService:
    """Verifies the store is reachable and image processing works."""

    def __init__(self, runtime: Runtime) -> None:
        self.store = runtime.store
        self.processor = runtime.processor
        self.key = runtime.health_check_key

    def check(self) -> dict[str, str]:
        """Fetch the health check image and resize it.

        Returns:
            Names of the checks that passed with their state

        Raises:
            HealthCheckFailedError: If either step fails
        """
        try:
            sample = self.store.get_object(key=self.key)
            self.processor.resize_to_fit(
                sample.data,
                SizeSpec(width=HEALTH_CHECK_RESIZE_SIZE, height=HEALTH_CHECK_RESIZE_SIZE),
            )
        except ImageServiceError as exc:
            logger.exception("Health check failed", extra={"key": self.key})
            raise HealthCheckFailedError(details={"reason": exc.message}) from exc

        return {"s3": "connected", "image_processing": "operational"}
