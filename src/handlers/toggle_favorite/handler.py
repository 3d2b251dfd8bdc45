"""
Lambda handler responsible for flipping the favorite flag of an image.
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

from .models import ToggleFavoriteRequest, ToggleFavoriteResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    logger.info("Received toggle favorite request", extra=request_log_extra(event, context))

    path_params = get_path_params(event)
    request = validate_request(
        ToggleFavoriteRequest,
        {
            "album_id": path_params.get("album_id"),
            "image_id": path_params.get("image_id"),
        },
    )

    record = get_lifecycle_manager().toggle_favorite(request.image_id, request.album_id)

    response = ToggleFavoriteResponse(favorite=record.favorite, image=record)
    return ResponseBuilder.ok(response.model_dump(), message="Favorite status updated")
