"""Builder for the per-mode component replica blocks."""
from typing import Any, Dict

from ...profiles.models import ResourceProfile
from ...profiles.sizing import (
    BLOOM_COMPONENTS,
    DISTRIBUTED_COMPONENTS,
    LEGACY_COMPONENTS,
    SINGLE_BINARY_COMPONENT,
)
from ...request.schema import DeploymentMode, ValidatedRequest

GATEWAY_COMPONENT = "gateway"

class ComponentsBuilder:
    """Builds deploymentMode and every component block for the Loki chart.

    Exactly one topology is active: SingleBinary sizes the combined binary and
    zeroes the distributed roles, Distributed does the reverse.
    """

    def __init__(self):
        """Initialize the builder."""
        self.run_as_user = 10001
        self.chunks_cache_memory = 1000

    def build(self, request: ValidatedRequest, profile: ResourceProfile) -> Dict[str, Any]:
        """Build the component section of the values payload.

        Args:
            request: Validated deployment request.
            profile: Sizing profile for the request's mode.

        Returns:
            Dict[str, Any]: Values keys from deploymentMode onward.
        """
        if request.mode == DeploymentMode.DISTRIBUTED:
            return self._build_distributed(profile)
        return self._build_single_binary(profile)

    def _build_single_binary(self, profile: ResourceProfile) -> Dict[str, Any]:
        single_binary = profile.component(SINGLE_BINARY_COMPONENT).to_dict()
        single_binary["persistence"] = {
            "enabled": True,
            "size": profile.persistence.size,
        }

        values: Dict[str, Any] = {
            "deploymentMode": DeploymentMode.SINGLE_BINARY.value,
            GATEWAY_COMPONENT: {"enabled": False, "replicas": 0},
            "minio": {"enabled": False},
            SINGLE_BINARY_COMPONENT: single_binary,
            "chunksCache": {"allocatedMemory": self.chunks_cache_memory},
        }
        for name in LEGACY_COMPONENTS:
            values[name] = {"replicas": 0}
        for name in DISTRIBUTED_COMPONENTS:
            if name == GATEWAY_COMPONENT:
                continue
            values[name] = {"replicas": 0}
        for name in BLOOM_COMPONENTS:
            values[name] = {"replicas": 0}

        values["monitoring"] = self._monitoring(profile)
        values["test"] = {"enabled": False}
        return values

    def _build_distributed(self, profile: ResourceProfile) -> Dict[str, Any]:
        values: Dict[str, Any] = {
            "deploymentMode": DeploymentMode.DISTRIBUTED.value,
        }
        for name in DISTRIBUTED_COMPONENTS:
            block = profile.component(name).to_dict()
            if name == GATEWAY_COMPONENT:
                # Gateway is the only externally reachable entry point
                block = {"enabled": True, **block}
                resources = block.pop("resources", None)
                block["service"] = {"type": "LoadBalancer"}
                if resources:
                    block["resources"] = resources
            values[name] = block

        values["minio"] = {"enabled": False}
        values[SINGLE_BINARY_COMPONENT] = {"replicas": 0}
        for name in LEGACY_COMPONENTS:
            values[name] = {"replicas": 0}

        values["monitoring"] = self._monitoring(profile)

        persistence: Dict[str, Any] = {
            "enabled": True,
            "size": profile.persistence.size,
        }
        if profile.persistence.storage_class:
            persistence["storageClass"] = profile.persistence.storage_class
        values["persistence"] = persistence

        values["securityContext"] = {
            "runAsNonRoot": True,
            "runAsUser": self.run_as_user,
            "runAsGroup": self.run_as_user,
            "fsGroup": self.run_as_user,
        }
        return values

    def _monitoring(self, profile: ResourceProfile) -> Dict[str, Any]:
        return {
            "serviceMonitor": {"enabled": profile.monitoring_enabled},
            "dashboards": {"enabled": profile.monitoring_enabled},
        }
