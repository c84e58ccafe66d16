"""Tests for interactive request collection."""
import pytest
from unittest.mock import patch
from lokigen.errors import MissingRequiredField
from lokigen.request.prompts import prompt_for_request
from lokigen.request.schema import DEFAULT_OUTPUT_PATH, DEFAULT_RESOURCE_GROUP, DeploymentMode

def _answers(*values):
    return patch("lokigen.request.prompts.typer.prompt", side_effect=list(values))

def test_full_answers():
    """Test collecting every field."""
    with _answers("acct1", "cid-123", "sub-1", "rg1", "2", "my-loki.yaml"):
        request = prompt_for_request()
    assert request.storage_account == "acct1"
    assert request.client_id == "cid-123"
    assert request.subscription_id == "sub-1"
    assert request.resource_group == "rg1"
    assert request.mode == DeploymentMode.DISTRIBUTED
    assert request.output_path == "my-loki.yaml"

def test_blank_optional_answers():
    """Test defaults for optional prompts and an invalid mode choice."""
    with _answers("acct1", "cid-123", "", "", "7", DEFAULT_OUTPUT_PATH):
        request = prompt_for_request()
    assert request.subscription_id is None
    assert request.resource_group == DEFAULT_RESOURCE_GROUP
    assert request.mode == DeploymentMode.SINGLE_BINARY
    assert request.output_path == DEFAULT_OUTPUT_PATH

def test_missing_storage_account():
    """Test that an empty storage account stops prompting."""
    with _answers("", "unused") as prompt:
        with pytest.raises(MissingRequiredField) as exc_info:
            prompt_for_request()
    assert exc_info.value.field == "storageAccount"
    assert prompt.call_count == 1

def test_missing_client_id():
    """Test that an empty client ID stops prompting."""
    with _answers("acct1", ""):
        with pytest.raises(MissingRequiredField) as exc_info:
            prompt_for_request()
    assert exc_info.value.field == "clientId"
