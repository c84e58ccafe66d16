"""Tests for manifest serialization."""
import dataclasses
import pytest
import yaml
from datetime import datetime, timezone
from unittest.mock import patch
from lokigen.errors import EncodingError
from lokigen.manifest.generator import render
from lokigen.manifest.serializer import render_values, serialize
from lokigen.profiles.sizing import resolve_profile
from lokigen.request.schema import ValidatedRequest

def load_values(text):
    """Parse a serialized manifest and its embedded Helm values."""
    document = yaml.safe_load(text)
    return document, yaml.safe_load(document["spec"]["source"]["helm"]["values"])

def _serialize(request, generated_at):
    return serialize(render(request, resolve_profile(request.mode), generated_at))

def test_top_level_order(make_request, generated_at):
    """Test the fixed top-level and spec key order."""
    text = _serialize(make_request(), generated_at)
    assert text.startswith("---\n")
    document, _ = load_values(text)
    assert list(document) == ["apiVersion", "kind", "metadata", "spec"]
    assert list(document["spec"]) == ["project", "destination", "source", "syncPolicy"]
    assert list(document["spec"]["source"]) == ["repoURL", "chart", "targetRevision", "helm"]
    assert document["spec"]["syncPolicy"]["automated"] == {"prune": True, "selfHeal": True}

def test_values_embedded_as_literal_block(make_request, generated_at):
    """Test that Helm values are an indented block with provenance comments."""
    text = _serialize(make_request(), generated_at)
    assert "values: |" in text
    assert "# Storage Account: acct1" in text
    assert "# Client ID: cid-123" in text
    assert f"# Generated on: {generated_at.isoformat()}" in text

def test_distributed_scenario(make_request, generated_at):
    """Test the distributed example request end to end."""
    _, values = load_values(_serialize(make_request(mode="distributed"), generated_at))
    assert values["deploymentMode"] == "Distributed"
    assert values["ingester"]["replicas"] == 3
    assert values["singleBinary"]["replicas"] == 0
    assert values["loki"]["storage_config"]["azure"]["account_name"] == "acct1"
    assert values["serviceAccount"]["annotations"]["azure.workload.identity/client-id"] == "cid-123"
    assert values["loki"]["schemaConfig"]["configs"][0]["from"] == "2024-04-01"

def test_deterministic_modulo_timestamp(make_request, generated_at):
    """Test that only the timestamp differs between runs."""
    request = make_request(mode="distributed")
    later = datetime(2027, 6, 7, 8, 9, 10, tzinfo=timezone.utc)
    first = _serialize(request, generated_at)
    assert first == _serialize(request, generated_at)
    second = _serialize(request, later)
    assert first != second
    assert first.replace(generated_at.isoformat(), "T") == second.replace(later.isoformat(), "T")

def test_unencodable_content(make_request, generated_at):
    """Test that foreign objects in the tree raise EncodingError."""
    manifest = render(make_request(), resolve_profile(make_request().mode), generated_at)
    broken = dataclasses.replace(
        manifest,
        source=dataclasses.replace(manifest.source, values={"bad": object()}),
    )
    with pytest.raises(EncodingError):
        serialize(broken)

def test_line_breaks_stay_in_header_comment(generated_at, tmp_path):
    """Test that a client ID with newlines cannot inject Helm values."""
    request = ValidatedRequest(
        storage_account="acct1",
        client_id="cid\ndeploymentMode: Distributed\nx",
        output_path=str(tmp_path / "loki.yaml"),
    )
    text = _serialize(request, generated_at)
    document, values = load_values(text)
    assert values["deploymentMode"] == "SingleBinary"
    assert values["serviceAccount"]["annotations"]["azure.workload.identity/client-id"] == request.client_id
    header = document["spec"]["source"]["helm"]["values"].split("\n\n", 1)[0]
    assert all(line.startswith("# ") for line in header.splitlines())
    assert "# Client ID: cid deploymentMode: Distributed x" in header.splitlines()

def test_unparseable_values_rejected(make_request, generated_at):
    """Test that values text which does not load back raises EncodingError."""
    manifest = render(make_request(), resolve_profile(make_request().mode), generated_at)
    with patch("lokigen.manifest.serializer.yaml.safe_load", side_effect=yaml.YAMLError("broken")):
        with pytest.raises(EncodingError):
            render_values(manifest)

def test_mismatched_values_rejected(make_request, generated_at):
    """Test that values text which loads to a different tree raises EncodingError."""
    manifest = render(make_request(), resolve_profile(make_request().mode), generated_at)
    with patch("lokigen.manifest.serializer.yaml.safe_load", return_value={"deploymentMode": "Distributed"}):
        with pytest.raises(EncodingError):
            render_values(manifest)
