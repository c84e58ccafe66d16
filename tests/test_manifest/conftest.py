"""Shared fixtures for manifest tests."""
from datetime import datetime, timezone

import pytest
from lokigen.request.schema import DeploymentRequest
from lokigen.request.validator import validate

@pytest.fixture
def generated_at():
    return datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

@pytest.fixture
def make_request(tmp_path):
    """Build a validated request writing into tmp_path."""
    def _make(**overrides):
        fields = {
            "storage_account": "acct1",
            "client_id": "cid-123",
            "output_path": str(tmp_path / "loki-generated.yaml"),
        }
        fields.update(overrides)
        return validate(DeploymentRequest(**fields))
    return _make
