"""Data models for mode-dependent resource sizing."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

@dataclass(frozen=True)
class ResourceQuantities:
    """CPU and memory quantities in Kubernetes notation."""
    cpu: str
    memory: str
    
    def to_dict(self) -> Dict[str, str]:
        return {"cpu": self.cpu, "memory": self.memory}

@dataclass(frozen=True)
class ComponentSizing:
    """Replica count and resources for a single Loki component."""
    replicas: int
    requests: Optional[ResourceQuantities] = None
    limits: Optional[ResourceQuantities] = None
    max_unavailable: Optional[int] = None
    
    @property
    def enabled(self) -> bool:
        """Check if the component runs any replicas."""
        return self.replicas > 0
    
    def to_dict(self) -> Dict[str, Any]:
        """Render the Helm values block for this component."""
        block: Dict[str, Any] = {"replicas": self.replicas}
        if self.max_unavailable is not None:
            block["maxUnavailable"] = self.max_unavailable
        if self.requests or self.limits:
            resources = {}
            if self.requests:
                resources["requests"] = self.requests.to_dict()
            if self.limits:
                resources["limits"] = self.limits.to_dict()
            block["resources"] = resources
        return block

@dataclass(frozen=True)
class LimitsSizing:
    """Per-tenant ingestion and query limits."""
    ingestion_rate_mb: int
    ingestion_burst_size_mb: int
    max_query_parallelism: int
    max_streams_per_user: Optional[int] = None

@dataclass(frozen=True)
class PersistenceSizing:
    """Persistent volume settings."""
    size: str
    storage_class: Optional[str] = None

@dataclass(frozen=True)
class ResourceProfile:
    """Immutable sizing table entry for one deployment mode."""
    components: Mapping[str, ComponentSizing]
    limits: LimitsSizing
    querier_max_concurrent: int
    monitoring_enabled: bool
    persistence: PersistenceSizing
    
    def __post_init__(self):
        # Freeze the component mapping so profiles can be shared
        object.__setattr__(self, "components", MappingProxyType(dict(self.components)))
    
    def component(self, name: str) -> ComponentSizing:
        """Look up a component, treating unknown ones as disabled."""
        return self.components.get(name, ComponentSizing(replicas=0))
