"""
Lambda handler responsible for serving the stored image bytes.
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

from .models import GetImageFileRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image view or download requests.

    This function:
     - Default: serve the image inline
     - download=true: serve it as an attachment

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        Base64-encoded binary API Gateway response.
    """
    logger.info("Received image file request", extra=request_log_extra(event, context))

    path_params = get_path_params(event)
    query_params = event.get("queryStringParameters") or {}

    request = validate_request(
        GetImageFileRequest,
        {
            "album_id": path_params.get("album_id"),
            "image_id": path_params.get("image_id"),
            "download": str(query_params.get("download", "false")).lower() == "true",
        },
    )

    content, content_type, record = get_lifecycle_manager().fetch_image_file(
        request.image_id,
        request.album_id,
    )

    disposition = "attachment" if request.download else "inline"
    return ResponseBuilder.binary_response(
        content,
        content_type=content_type,
        headers={
            "Content-Disposition": f'{disposition}; filename="{record.image_name}"',
            "Cache-Control": "private, max-age=300",
        },
    )
