"""
Lambda handler responsible for deleting an image resource.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.container import get_lifecycle_manager
from core.utils.constants import METRICS_NAMESPACE, SERVICE_NAME
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_params, request_log_extra
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import DeleteImageRequest, DeleteImageResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    This function:
    - Extracts the album and image identifiers from the path parameters
    - Deletes the stored object (best-effort) and then the record
    - Reports object store failures in ``storage_errors`` without failing

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info("Received image delete request", extra=request_log_extra(event, context))

    path_params = get_path_params(event)
    request = validate_request(
        DeleteImageRequest,
        {
            "album_id": path_params.get("album_id"),
            "image_id": path_params.get("image_id"),
        },
    )

    result = get_lifecycle_manager().delete_single(request.image_id, request.album_id)

    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=1)
    if result.storage_errors:
        metrics.add_metric(name="ObjectDeleteFailures", unit=MetricUnit.Count, value=len(result.storage_errors))

    response = DeleteImageResponse(
        image_id=result.image_id,
        object_key=result.object_key,
        storage_errors=result.storage_errors,
    )
    return ResponseBuilder.ok(response.model_dump(), message="Image deleted successfully")
