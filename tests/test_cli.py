"""Tests for the CLI entrypoint."""
import yaml
from pathlib import Path
from typer.testing import CliRunner
from unittest.mock import patch
from lokigen.cluster.validator import CheckResult, CheckStatus, ValidationReport
from main import app

runner = CliRunner()

def _values(path):
    document = yaml.safe_load(Path(path).read_text())
    return yaml.safe_load(document["spec"]["source"]["helm"]["values"])

def test_help():
    """Test that -h and --help are both accepted."""
    for flag in ("-h", "--help"):
        result = runner.invoke(app, ["generate", flag])
        assert result.exit_code == 0
        assert "--storage-account" in result.output

def test_generate_distributed(tmp_path):
    """Test the distributed example scenario."""
    output = tmp_path / "loki.yaml"
    result = runner.invoke(app, [
        "generate", "--storage-account", "acct1", "--client-id", "cid-123",
        "--mode", "distributed", "--output", str(output),
    ])
    assert result.exit_code == 0, result.output
    values = _values(output)
    assert values["deploymentMode"] == "Distributed"
    assert values["ingester"]["replicas"] == 3
    assert values["singleBinary"]["replicas"] == 0
    assert values["loki"]["storage_config"]["azure"]["account_name"] == "acct1"
    assert "--resource-group and --subscription-id" in result.output

def test_generate_with_setup_script(tmp_path):
    """Test that both Azure flags produce the setup script."""
    output = tmp_path / "loki.yaml"
    result = runner.invoke(app, [
        "generate", "--storage-account", "acct1", "--client-id", "cid-123",
        "--resource-group", "rg1", "--subscription-id", "sub-1", "--output", str(output),
    ])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "setup-azure-acct1.sh").exists()
    assert _values(output)["deploymentMode"] == "SingleBinary"

def test_missing_client_id(tmp_path):
    """Test that a missing client ID fails without writing output."""
    output = tmp_path / "loki.yaml"
    result = runner.invoke(app, ["generate", "--storage-account", "acct1", "--output", str(output)])
    assert result.exit_code != 0
    assert "clientId" in result.output
    assert not output.exists()

def test_invalid_mode(tmp_path):
    """Test that an unknown mode fails without writing output."""
    output = tmp_path / "loki.yaml"
    result = runner.invoke(app, [
        "generate", "--storage-account", "acct1", "--client-id", "cid-123",
        "--mode", "scalable", "--output", str(output),
    ])
    assert result.exit_code == 1
    assert "scalable" in result.output
    assert not output.exists()

def test_unknown_flag():
    """Test that unknown flags are rejected."""
    result = runner.invoke(app, ["generate", "--region", "eastus"])
    assert result.exit_code != 0

def test_config_file_with_override(tmp_path):
    """Test loading a request file and overriding it with flags."""
    output = tmp_path / "loki.yaml"
    config = tmp_path / "request.yaml"
    config.write_text(f"storageAccount: fileacct\nclientId: cid-file\nmode: dist\noutputPath: {output}\n")
    result = runner.invoke(app, ["generate", "--config", str(config), "--client-id", "cid-flag"])
    assert result.exit_code == 0, result.output
    values = _values(output)
    assert values["deploymentMode"] == "Distributed"
    assert values["serviceAccount"]["annotations"]["azure.workload.identity/client-id"] == "cid-flag"

def test_missing_config_file(tmp_path):
    """Test that an unreadable request file is reported."""
    result = runner.invoke(app, ["generate", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1

def test_interactive(tmp_path):
    """Test interactive prompting end to end."""
    output = tmp_path / "loki.yaml"
    answers = "\n".join(["acct1", "cid-123", "", "", "2", str(output)]) + "\n"
    result = runner.invoke(app, ["generate", "--interactive"], input=answers)
    assert result.exit_code == 0, result.output
    assert _values(output)["deploymentMode"] == "Distributed"
    # Resource group defaults but no subscription means no setup script
    assert list(tmp_path.glob("setup-azure-*.sh")) == []

@patch("main.ClusterValidator")
def test_validate_failure_exit_code(mock_validator):
    """Test that failed checks give a non-zero exit code."""
    report = ValidationReport(namespace="loki", results=[
        CheckResult("kubectl", CheckStatus.FAILED, "kubectl is not installed or not in PATH", fatal=True),
    ])
    mock_validator.return_value.run.return_value = report
    result = runner.invoke(app, ["validate"])
    assert result.exit_code == 1
    assert "kubectl is not installed" in result.output

@patch("main.ClusterValidator")
def test_validate_namespace_from_env(mock_validator):
    """Test that the namespace can come from the environment."""
    mock_validator.return_value.run.return_value = ValidationReport(namespace="logs", results=[
        CheckResult("namespace", CheckStatus.PASSED, "Namespace 'logs' exists"),
    ])
    result = runner.invoke(app, ["validate"], env={"LOKI_NAMESPACE": "logs"})
    assert result.exit_code == 0, result.output
    assert mock_validator.call_args.kwargs["namespace"] == "logs"
    assert "kubectl describe serviceaccount loki -n logs" in result.output

def test_client_id_with_newline_rejected(tmp_path):
    """Test that a multi-line client ID fails without writing output."""
    output = tmp_path / "loki.yaml"
    result = runner.invoke(app, [
        "generate", "--storage-account", "acct1", "--client-id", "cid\nx", "--output", str(output),
    ])
    assert result.exit_code == 1
    assert "clientId" in result.output
    assert not output.exists()

def test_invalid_storage_account_rejected(tmp_path):
    """Test that a storage account with path characters writes nothing."""
    output = tmp_path / "loki.yaml"
    result = runner.invoke(app, [
        "generate", "--storage-account", "../acct1", "--client-id", "cid-123",
        "--resource-group", "rg1", "--subscription-id", "sub-1", "--output", str(output),
    ])
    assert result.exit_code == 1
    assert "storageAccount" in result.output
    assert list(tmp_path.iterdir()) == []

def test_output_path_with_brackets(tmp_path):
    """Test that markup-like characters in the output path are printed verbatim."""
    output = tmp_path / "out[bold]" / "loki.yaml"
    result = runner.invoke(app, [
        "generate", "--storage-account", "acct1", "--client-id", "cid-123", "--output", str(output),
    ])
    assert result.exit_code == 0, result.output
    assert output.exists()
    assert f"kubectl apply -f {output}" in result.output
