"""
Lambda handler responsible for image upload and record creation.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.container import get_lifecycle_manager
from core.utils.constants import METRICS_NAMESPACE, SERVICE_NAME
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_body_bytes, get_header, get_path_params, request_log_extra
from core.utils.multipart import parse_multipart
from core.utils.response import ResponseBuilder
from core.utils.validators import select_upload_file, validate_request

from .models import ImageUploadRequest, ImageUploadResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    Expected API Gateway event structure:
    {
        "pathParameters": {"album_id": "..."},
        "headers": {"Content-Type": "multipart/form-data; boundary=..."},
        "body": "...",             # multipart body, base64 for binary media
        "isBase64Encoded": true
    }

    The form carries exactly one file in the ``image`` field and optional
    ``tags`` (JSON array) and ``person`` text fields.

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response containing the created record
    """
    logger.info("Received image upload request", extra=request_log_extra(event, context))

    fields, files = parse_multipart(
        get_body_bytes(event),
        get_header(event, "Content-Type"),
    )

    request = validate_request(
        ImageUploadRequest,
        {
            "album_id": get_path_params(event).get("album_id"),
            "tags": fields.get("tags"),
            "person": fields.get("person"),
        },
    )
    file = select_upload_file(files)

    record = get_lifecycle_manager().upload(
        album_id=request.album_id,
        file=file,
        tags=request.tags,
        person=request.person,
    )

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name="UploadedBytes", unit=MetricUnit.Bytes, value=record.file_size)

    response = ImageUploadResponse(image=record)
    return ResponseBuilder.created(
        response.model_dump(),
        message="Image uploaded successfully",
    )
