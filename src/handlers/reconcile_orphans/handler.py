"""
Scheduled Lambda handler that removes images whose album no longer exists.

Runs from an EventBridge schedule or an administrative invoke. Repository
failures are not translated into a response: the invocation fails so the
scheduler records the error and the next run retries the whole sweep.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.container import get_lifecycle_manager
from core.utils.constants import METRICS_NAMESPACE, SERVICE_NAME
from core.utils.response import ResponseBuilder

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    logger.info(
        "Starting orphaned image reconciliation",
        extra={
            "source": event.get("source") if isinstance(event, dict) else None,
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    result = get_lifecycle_manager().reconcile_orphans()

    metrics.add_metric(name="ImagesScanned", unit=MetricUnit.Count, value=result.scanned_count)
    metrics.add_metric(name="OrphanedImagesCleaned", unit=MetricUnit.Count, value=result.cleaned_count)
    metrics.add_metric(name="ObjectDeleteFailures", unit=MetricUnit.Count, value=len(result.errors))

    return ResponseBuilder.ok(
        result.model_dump(),
        message=f"Cleaned up {result.cleaned_count} orphaned images",
    )
