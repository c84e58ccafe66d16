"""Builder for the workload-identity service account block."""
from typing import Any, Dict

from .loki_config import WORKLOAD_IDENTITY_LABEL
from ...request.schema import ValidatedRequest

CLIENT_ID_ANNOTATION = "azure.workload.identity/client-id"
SERVICE_ACCOUNT_NAME = "loki"

class ServiceAccountBuilder:
    """Binds the request's client ID to the Loki service account."""

    def build(self, request: ValidatedRequest) -> Dict[str, Any]:
        return {
            "name": SERVICE_ACCOUNT_NAME,
            "annotations": {CLIENT_ID_ANNOTATION: request.client_id},
            "labels": {WORKLOAD_IDENTITY_LABEL: "true"},
        }
