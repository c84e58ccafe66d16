"""Loki ArgoCD manifest generator."""
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .builders.components import ComponentsBuilder
from .builders.loki_config import LokiConfigBuilder
from .builders.service_account import ServiceAccountBuilder
from .models import DeploymentManifest, Destination, HelmSource, ManifestMetadata, SyncPolicy
from .serializer import serialize
from ..console import log_debug
from ..profiles.models import ResourceProfile
from ..profiles.sizing import resolve_profile
from ..request.schema import DeploymentMode, ValidatedRequest
from ..setup_script.generator import SetupScriptGenerator

APP_NAME = "loki"
APP_NAMESPACE = "argocd"
APP_PROJECT = "default"
DESTINATION_SERVER = "https://kubernetes.default.svc"
DESTINATION_NAMESPACE = "loki"

CHART_REPO_URL = "https://grafana.github.io/helm-charts"
CHART_NAME = "loki"
CHART_VERSION = "6.37.0"

SYNC_OPTIONS_ANNOTATION = "argocd.argoproj.io/sync-options"
SYNC_OPTIONS = ("CreateNamespace=true", "SkipDryRunOnMissingResource=true")

def _mode_label(mode: DeploymentMode) -> str:
    return "distributed configuration" if mode == DeploymentMode.DISTRIBUTED else "configuration"

def build_values(request: ValidatedRequest, profile: ResourceProfile) -> Dict[str, Any]:
    """Assemble the Helm values payload in chart key order."""
    values: Dict[str, Any] = {
        "loki": LokiConfigBuilder().build(request, profile),
        "serviceAccount": ServiceAccountBuilder().build(request),
    }
    values.update(ComponentsBuilder().build(request, profile))
    return values

def render(
    request: ValidatedRequest,
    profile: ResourceProfile,
    generated_at: Optional[datetime] = None,
) -> DeploymentManifest:
    """Build the deployment manifest tree.

    Identical inputs always produce an identical tree; only ``generated_at``
    varies between runs when it is left to default to the current time.

    Args:
        request: Validated deployment request.
        profile: Sizing profile for the request's mode.
        generated_at: Provenance timestamp; defaults to now (UTC).

    Returns:
        DeploymentManifest: The ArgoCD Application manifest.
    """
    timestamp = (generated_at or datetime.now(timezone.utc)).isoformat()
    label = _mode_label(request.mode)
    heading = "Generated Loki Distributed configuration" if request.mode == DeploymentMode.DISTRIBUTED else "Generated Loki configuration"

    return DeploymentManifest(
        metadata=ManifestMetadata(
            name=APP_NAME,
            namespace=APP_NAMESPACE,
            annotations={
                SYNC_OPTIONS_ANNOTATION: "CreateNamespace=true",
                "documentation": f"Generated {label} for {request.storage_account} on {timestamp}",
            },
        ),
        project=APP_PROJECT,
        destination=Destination(server=DESTINATION_SERVER, namespace=DESTINATION_NAMESPACE),
        source=HelmSource(
            repo_url=CHART_REPO_URL,
            chart=CHART_NAME,
            target_revision=CHART_VERSION,
            values=build_values(request, profile),
            values_header=(
                heading,
                f"Storage Account: {request.storage_account}",
                f"Client ID: {request.client_id}",
                f"Generated on: {timestamp}",
            ),
        ),
        sync_policy=SyncPolicy(sync_options=SYNC_OPTIONS, prune=True, self_heal=True),
    )

class ManifestGenerator:
    """Generates the Loki manifest and optional setup script from a validated request."""

    def __init__(self, request: ValidatedRequest, debug: bool = False):
        """Initialize the generator.

        Args:
            request: Validated deployment request.
            debug: If True, print verbose debug information.
        """
        self.request = request
        self.debug = debug
        self.profile = resolve_profile(request.mode)
        self.setup_scripts = SetupScriptGenerator()

    def generate(self, generated_at: Optional[datetime] = None) -> Tuple[str, Optional[str]]:
        """Render, serialize and write the output artifacts.

        Both artifacts are fully serialized before anything is written.

        Returns:
            Tuple[str, Optional[str]]: Manifest path and setup script path (None when not generated).
        """
        generated_at = generated_at or datetime.now(timezone.utc)
        log_debug(f"Resolved {self.request.mode.value} profile with "
                  f"{sum(c.replicas for c in self.profile.components.values())} total replicas", self.debug)

        manifest_text = serialize(render(self.request, self.profile, generated_at))
        script_text = None
        if self.request.wants_setup_script:
            script_text = self.setup_scripts.render(self.request, generated_at)

        output_path = Path(self.request.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(manifest_text)
        log_debug(f"Manifest written to {output_path}", self.debug)

        script_path = None
        if script_text is not None:
            script_path = SetupScriptGenerator.script_path(self.request)
            script_path.write_text(script_text)
            script_path.chmod(0o755)
            log_debug(f"Setup script written to {script_path}", self.debug)

        return str(output_path), str(script_path) if script_path else None
