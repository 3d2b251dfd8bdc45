"""
Lambda handler responsible for replacing the tags / person of an image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.container import get_lifecycle_manager
from core.utils.constants import METRICS_NAMESPACE, SERVICE_NAME
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_params, parse_json_body, request_log_extra
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import UpdateMetadataRequest, UpdateMetadataResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image metadata update requests.

    Expected body: ``{"tags": ["beach"], "person": "Alice"}``; at least one
    of the two fields must be present.
    """
    logger.info("Received update metadata request", extra=request_log_extra(event, context))

    path_params = get_path_params(event)
    body = parse_json_body(event)
    request = validate_request(
        UpdateMetadataRequest,
        {
            "album_id": path_params.get("album_id"),
            "image_id": path_params.get("image_id"),
            "tags": body.get("tags"),
            "person": body.get("person"),
        },
    )

    record = get_lifecycle_manager().update_metadata(
        request.image_id,
        request.album_id,
        tags=request.tags,
        person=request.person,
    )

    response = UpdateMetadataResponse(image=record)
    return ResponseBuilder.ok(response.model_dump(), message="Image metadata updated successfully")
