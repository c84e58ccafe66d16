"""Loki Provisioner CLI entrypoint."""
import typer
import yaml
from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table
from typing import Optional

from lokigen.cluster.runner import CommandRunner
from lokigen.cluster.validator import CheckStatus, ClusterValidator, useful_commands
from lokigen.console import console, log_error, log_info, log_success, log_warning
from lokigen.errors import LokiGenError
from lokigen.manifest.generator import ManifestGenerator
from lokigen.request.loader import RequestLoader
from lokigen.request.prompts import prompt_for_request
from lokigen.request.schema import DeploymentRequest
from lokigen.request.validator import validate as validate_request

app = typer.Typer(
    help="Loki Provisioner - ArgoCD manifest generator and cluster validator for Grafana Loki on Azure",
    context_settings={"help_option_names": ["-h", "--help"]},
)

STATUS_STYLES = {
    CheckStatus.PASSED: "[green]✓ PASSED[/]",
    CheckStatus.WARNING: "[yellow]! WARNING[/]",
    CheckStatus.FAILED: "[red]❌ FAILED[/]",
    CheckStatus.SKIPPED: "[dim]- SKIPPED[/]",
}

@app.command("generate")
def generate(
    storage_account: Optional[str] = typer.Option(None, "--storage-account", help="Azure storage account name"),
    client_id: Optional[str] = typer.Option(None, "--client-id", help="Azure AD application client ID"),
    subscription_id: Optional[str] = typer.Option(None, "--subscription-id", help="Azure subscription ID"),
    resource_group: Optional[str] = typer.Option(None, "--resource-group", help="Azure resource group name"),
    mode: Optional[str] = typer.Option(None, "--mode", help="Deployment mode: single or distributed (default: single)"),
    output: Optional[str] = typer.Option(None, "--output", help="Output file path (default: loki-generated.yaml)"),
    interactive: bool = typer.Option(False, "--interactive", help="Interactive mode to prompt for values"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="YAML file with request values; flags override it"),
    debug: bool = typer.Option(False, "--debug", help="Print verbose debug information"),
):
    """Generate a Loki ArgoCD Application manifest."""
    try:
        if interactive:
            request = prompt_for_request()
        else:
            base = RequestLoader.load(config) if config else DeploymentRequest()
            request = RequestLoader.merge(base, {
                "storage_account": storage_account,
                "client_id": client_id,
                "subscription_id": subscription_id,
                "resource_group": resource_group,
                "mode": mode,
                "output_path": output,
            })

        validated = validate_request(request)
        if not request.mode:
            log_info("Using default deployment mode: single")
        if not request.output_path:
            log_info(f"Using default output file: {validated.output_path}")

        log_info("Generating Loki configuration...")
        log_info(f"Storage Account: {validated.storage_account}")
        log_info(f"Client ID: {validated.client_id}")
        log_info(f"Deployment Mode: {validated.mode.value}")
        log_info(f"Output File: {validated.output_path}")

        generator = ManifestGenerator(validated, debug=debug)
        manifest_path, script_path = generator.generate()
    except (LokiGenError, OSError, yaml.YAMLError, ValidationError) as e:
        log_error(str(e))
        raise typer.Exit(code=1)

    log_success(f"Generated Loki configuration: {manifest_path}")
    if script_path:
        log_success(f"Generated Azure setup script: {script_path}")
    else:
        log_info("To generate Azure setup script, provide --resource-group and --subscription-id")

    console.print()
    log_info("Next steps:")
    console.print("1. Review and customize the generated configuration")
    console.print(f"2. Apply the configuration: kubectl apply -f {escape(manifest_path)}")
    console.print("3. Validate the setup: python main.py validate")

@app.command("validate")
def validate(
    namespace: str = typer.Option("loki", "--namespace", envvar="LOKI_NAMESPACE", help="Loki namespace"),
    timeout: int = typer.Option(300, "--timeout", envvar="TIMEOUT", help="Timeout for operations in seconds"),
    debug: bool = typer.Option(False, "--debug", help="Print every kubectl command before running it"),
):
    """Validate that Loki is deployed and healthy in the current cluster."""
    console.print("[bold blue]Loki Setup Validation[/]")

    try:
        validator = ClusterValidator(CommandRunner(debug=debug, timeout=timeout), namespace=namespace)
        report = validator.run()
    except Exception as e:
        log_error(str(e))
        raise typer.Exit(code=1)

    table = Table(title=f"Loki checks in namespace '{namespace}'")
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Details")
    for result in report.results:
        details = result.message
        if result.hint:
            details += f"\n[dim]{result.hint}[/]"
        table.add_row(result.name, STATUS_STYLES[result.status], details)
    console.print(table)

    if report.aborted:
        log_warning("Validation stopped early after a fatal check")

    console.print("\n[bold blue]Useful debugging commands:[/]")
    for command in useful_commands(namespace):
        console.print(f"  {command}")

    if report.failed:
        raise typer.Exit(code=1)
    log_success("Validation complete")

if __name__ == "__main__":
    app()
