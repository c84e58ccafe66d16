"""YAML serialization of deployment manifests."""
import re
from typing import Any, Dict

import yaml

from .models import DeploymentManifest
from ..errors import EncodingError

class LiteralStr(str):
    """String emitted as a YAML literal block."""

class ManifestDumper(yaml.SafeDumper):
    """Safe dumper that keeps insertion order and supports literal blocks."""

def _represent_literal(dumper: yaml.SafeDumper, data: LiteralStr) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(data), style="|")

ManifestDumper.add_representer(LiteralStr, _represent_literal)

def _dump(data: Any, explicit_start: bool = False) -> str:
    try:
        return yaml.dump(
            data,
            Dumper=ManifestDumper,
            sort_keys=False,
            default_flow_style=False,
            explicit_start=explicit_start,
            allow_unicode=True,
            width=4096,
        )
    except yaml.YAMLError as e:
        raise EncodingError(f"Unable to encode manifest: {e}") from e

_LINE_BREAKS = re.compile(r"[\x00-\x1f\x7f\x85\u2028\u2029]")

def _comment(line: str) -> str:
    # Comments must stay on one line
    return "# " + _LINE_BREAKS.sub(" ", line) + "\n"

def render_values(manifest: DeploymentManifest) -> str:
    """Render the Helm values payload, prefixed by its provenance comments.

    Raises:
        EncodingError: If the assembled text does not load back to the values tree.
    """
    header = "".join(_comment(line) for line in manifest.source.values_header)
    body = _dump(manifest.source.values)
    text = f"{header}\n{body}" if header else body
    try:
        reloaded = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise EncodingError(f"Rendered Helm values are not valid YAML: {e}") from e
    if reloaded != manifest.source.values:
        raise EncodingError("Rendered Helm values do not match the values tree")
    return text

def manifest_to_dict(manifest: DeploymentManifest) -> Dict[str, Any]:
    """Convert a manifest tree to plain data in output key order."""
    return {
        "apiVersion": manifest.api_version,
        "kind": manifest.kind,
        "metadata": {
            "name": manifest.metadata.name,
            "namespace": manifest.metadata.namespace,
            "annotations": dict(manifest.metadata.annotations),
        },
        "spec": {
            "project": manifest.project,
            "destination": {
                "server": manifest.destination.server,
                "namespace": manifest.destination.namespace,
            },
            "source": {
                "repoURL": manifest.source.repo_url,
                "chart": manifest.source.chart,
                "targetRevision": manifest.source.target_revision,
                "helm": {
                    "values": LiteralStr(render_values(manifest)),
                },
            },
            "syncPolicy": {
                "syncOptions": list(manifest.sync_policy.sync_options),
                "automated": {
                    "prune": manifest.sync_policy.prune,
                    "selfHeal": manifest.sync_policy.self_heal,
                },
            },
        },
    }

def serialize(manifest: DeploymentManifest) -> str:
    """Serialize a manifest to a YAML document.

    Args:
        manifest: Rendered deployment manifest.

    Returns:
        str: YAML text starting with a document marker.

    Raises:
        EncodingError: If the tree holds values YAML cannot represent.
    """
    return _dump(manifest_to_dict(manifest), explicit_start=True)
