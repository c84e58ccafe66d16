"""Static sizing table keyed by deployment mode."""
from types import MappingProxyType

from .models import ComponentSizing, LimitsSizing, PersistenceSizing, ResourceProfile, ResourceQuantities
from ..request.schema import DeploymentMode

SINGLE_BINARY_COMPONENT = "singleBinary"

# Components that only run in Distributed mode
DISTRIBUTED_COMPONENTS = (
    "ingester",
    "querier",
    "queryFrontend",
    "queryScheduler",
    "distributor",
    "compactor",
    "indexGateway",
    "ruler",
    "gateway",
)

# Simple scalable targets, never used by either mode
LEGACY_COMPONENTS = ("backend", "read", "write")

# Bloom components, only disabled explicitly in SingleBinary mode
BLOOM_COMPONENTS = ("bloomCompactor", "bloomGateway")


def _q(cpu: str, memory: str) -> ResourceQuantities:
    return ResourceQuantities(cpu=cpu, memory=memory)


_DISABLED = ComponentSizing(replicas=0)

SIZING_TABLE = MappingProxyType({
    DeploymentMode.SINGLE_BINARY: ResourceProfile(
        components={
            SINGLE_BINARY_COMPONENT: ComponentSizing(
                replicas=3,
                requests=_q("500m", "1Gi"),
                limits=_q("1000m", "2Gi"),
            ),
            **{name: _DISABLED for name in DISTRIBUTED_COMPONENTS},
        },
        limits=LimitsSizing(
            ingestion_rate_mb=10,
            ingestion_burst_size_mb=20,
            max_query_parallelism=32,
        ),
        querier_max_concurrent=4,
        monitoring_enabled=False,
        persistence=PersistenceSizing(size="10Gi"),
    ),
    DeploymentMode.DISTRIBUTED: ResourceProfile(
        components={
            SINGLE_BINARY_COMPONENT: _DISABLED,
            "ingester": ComponentSizing(3, _q("1000m", "2Gi"), _q("2000m", "4Gi")),
            "querier": ComponentSizing(3, _q("500m", "1Gi"), _q("1000m", "2Gi"), max_unavailable=1),
            "queryFrontend": ComponentSizing(2, _q("500m", "512Mi"), _q("1000m", "1Gi"), max_unavailable=1),
            "queryScheduler": ComponentSizing(2, _q("100m", "128Mi"), _q("200m", "256Mi")),
            "distributor": ComponentSizing(3, _q("500m", "512Mi"), _q("1000m", "1Gi"), max_unavailable=1),
            "compactor": ComponentSizing(1, _q("500m", "1Gi"), _q("1000m", "2Gi")),
            "indexGateway": ComponentSizing(2, _q("500m", "512Mi"), _q("1000m", "1Gi"), max_unavailable=1),
            "ruler": ComponentSizing(1, _q("100m", "256Mi"), _q("500m", "512Mi"), max_unavailable=0),
            "gateway": ComponentSizing(2, _q("100m", "128Mi"), _q("500m", "256Mi")),
        },
        limits=LimitsSizing(
            ingestion_rate_mb=50,
            ingestion_burst_size_mb=100,
            max_query_parallelism=64,
            max_streams_per_user=10000,
        ),
        querier_max_concurrent=8,
        monitoring_enabled=True,
        persistence=PersistenceSizing(size="100Gi", storage_class="premium-ssd"),
    ),
})


def resolve_profile(mode: DeploymentMode) -> ResourceProfile:
    """Return the sizing profile for a validated mode."""
    return SIZING_TABLE[mode]
