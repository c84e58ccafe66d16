"""Builder for the core ``loki`` configuration block."""
from typing import Any, Dict

from ...profiles.models import ResourceProfile
from ...request.schema import ValidatedRequest

WORKLOAD_IDENTITY_LABEL = "azure.workload.identity/use"

CHUNKS_CONTAINER = "chunks"
RULER_CONTAINER = "ruler"
ADMIN_CONTAINER = "admin"

OBJECT_STORE = "azure"
INDEX_STORE = "tsdb"
SCHEMA_VERSION = "v13"
SCHEMA_FROM = "2024-04-01"
INDEX_PREFIX = "loki_index_"
INDEX_PERIOD = "24h"

class LokiConfigBuilder:
    """Builds the Loki server configuration: schema, storage, limits and per-role tuning."""

    def __init__(self):
        """Initialize the builder."""
        self.retention_period = "672h"
        self.alertmanager_url = "http://alertmanager:9093"

    def build(self, request: ValidatedRequest, profile: ResourceProfile) -> Dict[str, Any]:
        """Build the ``loki`` values block.

        Args:
            request: Validated deployment request.
            profile: Sizing profile for the request's mode.

        Returns:
            Dict[str, Any]: Values block, keys in chart order.
        """
        account = request.storage_account

        limits_config: Dict[str, Any] = {
            "allow_structured_metadata": True,
            "volume_enabled": True,
            "retention_period": self.retention_period,
            "ingestion_rate_mb": profile.limits.ingestion_rate_mb,
            "ingestion_burst_size_mb": profile.limits.ingestion_burst_size_mb,
            "max_query_parallelism": profile.limits.max_query_parallelism,
        }
        if profile.limits.max_streams_per_user is not None:
            limits_config["max_streams_per_user"] = profile.limits.max_streams_per_user

        return {
            "podLabels": {WORKLOAD_IDENTITY_LABEL: "true"},
            "schemaConfig": {
                "configs": [
                    {
                        "from": SCHEMA_FROM,
                        "store": INDEX_STORE,
                        "object_store": OBJECT_STORE,
                        "schema": SCHEMA_VERSION,
                        "index": {
                            "prefix": INDEX_PREFIX,
                            "period": INDEX_PERIOD,
                        },
                    }
                ]
            },
            "storage_config": {
                "azure": {
                    "account_name": account,
                    "container_name": CHUNKS_CONTAINER,
                    "use_federated_token": True,
                }
            },
            "ingester": {
                "chunk_encoding": "snappy",
                "chunk_idle_period": "5m",
                "chunk_target_size": 1048576,
                "max_chunk_age": "1h",
            },
            "pattern_ingester": {"enabled": True},
            "limits_config": limits_config,
            "compactor": {
                "retention_enabled": True,
                "delete_request_store": OBJECT_STORE,
                "compaction_interval": "10m",
            },
            "ruler": {
                "enable_api": True,
                "storage": {
                    "type": OBJECT_STORE,
                    "azure": {
                        "account_name": account,
                        "container_name": RULER_CONTAINER,
                        "use_federated_token": True,
                    },
                    "alertmanager_url": self.alertmanager_url,
                },
            },
            "querier": {
                "max_concurrent": profile.querier_max_concurrent,
                "query_timeout": "300s",
            },
            "storage": {
                "type": OBJECT_STORE,
                "bucketNames": {
                    "chunks": CHUNKS_CONTAINER,
                    "ruler": RULER_CONTAINER,
                    "admin": ADMIN_CONTAINER,
                },
                "azure": {
                    "accountName": account,
                    "useFederatedToken": True,
                },
            },
        }
