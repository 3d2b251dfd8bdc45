"""
Lambda handler responsible for appending a comment to an image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.container import get_lifecycle_manager
from core.utils.constants import METRICS_NAMESPACE, SERVICE_NAME
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_params, get_principal_id, parse_json_body, request_log_extra
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import AddCommentRequest, AddCommentResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle add comment requests.

    The comment author is the principal resolved by the API Gateway
    authorizer; requests without one are rejected with 401.

    Expected body: ``{"text": "Nice shot!"}``
    """
    logger.info("Received add comment request", extra=request_log_extra(event, context))

    author_id = get_principal_id(event)

    path_params = get_path_params(event)
    body = parse_json_body(event)
    request = validate_request(
        AddCommentRequest,
        {
            "album_id": path_params.get("album_id"),
            "image_id": path_params.get("image_id"),
            "text": body.get("text"),
        },
    )

    record = get_lifecycle_manager().add_comment(
        request.image_id,
        request.album_id,
        author_id=author_id,
        text=request.text,
    )

    response = AddCommentResponse(comment=record.comments[-1], image=record)
    return ResponseBuilder.created(response.model_dump(), message="Comment added successfully")
