"""Shared data models for ArgoCD Application manifests."""
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

API_VERSION = "argoproj.io/v1alpha1"
KIND = "Application"

@dataclass(frozen=True)
class ManifestMetadata:
    """Application metadata."""
    name: str
    namespace: str
    annotations: Dict[str, str] = field(default_factory=dict)

@dataclass(frozen=True)
class Destination:
    """Cluster and namespace the chart is installed into."""
    server: str
    namespace: str

@dataclass(frozen=True)
class HelmSource:
    """Helm chart coordinates plus the embedded values payload."""
    repo_url: str
    chart: str
    target_revision: str
    values: Dict[str, Any]
    values_header: Tuple[str, ...] = ()

@dataclass(frozen=True)
class SyncPolicy:
    """Automated sync settings."""
    sync_options: Tuple[str, ...]
    prune: bool = True
    self_heal: bool = True

@dataclass(frozen=True)
class DeploymentManifest:
    """ArgoCD Application wrapping the Loki Helm chart."""
    metadata: ManifestMetadata
    project: str
    destination: Destination
    source: HelmSource
    sync_policy: SyncPolicy
    api_version: str = API_VERSION
    kind: str = KIND
