"""
Lambda handler that removes every image of an album.

Invoked by the album service after an album is deleted, either directly
with ``{"album_id": "..."}`` or through API Gateway with the album id as a
path parameter.
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

from .models import DeleteAlbumImagesRequest, DeleteAlbumImagesResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    logger.info("Received album images delete request", extra=request_log_extra(event, context))

    album_id = event.get("album_id") or get_path_params(event).get("album_id")
    request = validate_request(DeleteAlbumImagesRequest, {"album_id": album_id})

    result = get_lifecycle_manager().delete_all_for_album(request.album_id)

    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=result.deleted_count)
    metrics.add_metric(name="ObjectDeleteFailures", unit=MetricUnit.Count, value=len(result.errors))

    response = DeleteAlbumImagesResponse(
        album_id=request.album_id,
        deleted_count=result.deleted_count,
        errors=result.errors,
    )
    return ResponseBuilder.ok(
        response.model_dump(),
        message=f"Deleted {result.deleted_count} images from album {request.album_id}",
    )
