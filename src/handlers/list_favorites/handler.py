"""
Lambda handler responsible for listing the favorite images of an album.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.container import get_lifecycle_manager
from core.utils.constants import METRICS_NAMESPACE, SERVICE_NAME
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_params, request_log_extra
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import ListFavoritesRequest, ListFavoritesResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Return the favorite images of an album, newest first."""
    logger.info("Received list favorites request", extra=request_log_extra(event, context))

    request = validate_request(
        ListFavoritesRequest,
        {"album_id": get_path_params(event).get("album_id")},
    )

    records = get_lifecycle_manager().list_album_images(request.album_id, favorites_only=True)

    response = ListFavoritesResponse(
        album_id=request.album_id,
        images=records,
        count=len(records),
    )
    return ResponseBuilder.ok(response.model_dump(), message="Favorite images retrieved successfully")
