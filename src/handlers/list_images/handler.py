"""
Lambda handler responsible for listing the images of an album.
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

from .models import ListImagesRequest, ListImagesResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Return every image record of an album, newest first.

    Args:
        event: API Gateway Lambda proxy event with ``album_id`` path parameter
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info("Received list images request", extra=request_log_extra(event, context))

    request = validate_request(
        ListImagesRequest,
        {"album_id": get_path_params(event).get("album_id")},
    )

    records = get_lifecycle_manager().list_album_images(request.album_id)

    response = ListImagesResponse(
        album_id=request.album_id,
        images=records,
        count=len(records),
    )
    return ResponseBuilder.ok(response.model_dump(), message="Images retrieved successfully")
