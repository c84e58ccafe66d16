"""Interactive collection of deployment parameters."""
import typer

from .schema import DEFAULT_OUTPUT_PATH, DEFAULT_RESOURCE_GROUP, DeploymentMode, DeploymentRequest
from ..console import console, log_info, log_warning
from ..errors import MissingRequiredField

MODE_CHOICES = {
    "1": DeploymentMode.SINGLE_BINARY,
    "2": DeploymentMode.DISTRIBUTED,
}


def _ask(text: str, default: str = "") -> str:
    return typer.prompt(text, default=default, show_default=bool(default)).strip()


def prompt_for_request() -> DeploymentRequest:
    """Prompt for every request field in turn.

    Returns:
        DeploymentRequest: The collected request.

    Raises:
        MissingRequiredField: If the storage account or client ID is left empty.
    """
    log_info("Interactive configuration mode")
    console.print()

    storage_account = _ask("Enter Azure storage account name")
    if not storage_account:
        raise MissingRequiredField("storageAccount")

    client_id = _ask("Enter Azure AD application client ID")
    if not client_id:
        raise MissingRequiredField("clientId")

    subscription_id = _ask("Enter Azure subscription ID")
    if not subscription_id:
        log_warning("Subscription ID not provided - you'll need to update the setup scripts manually")

    resource_group = _ask("Enter Azure resource group name")
    if not resource_group:
        log_warning(f"Resource group not provided - using '{DEFAULT_RESOURCE_GROUP}' as default")
        resource_group = DEFAULT_RESOURCE_GROUP

    console.print()
    console.print("Choose deployment mode:")
    console.print("1) SingleBinary (recommended for development/demo)")
    console.print("2) Distributed (recommended for production)")
    choice = _ask("Enter choice (1 or 2)")
    mode = MODE_CHOICES.get(choice)
    if mode is None:
        log_warning("Invalid choice, using SingleBinary mode")
        mode = DeploymentMode.SINGLE_BINARY

    output_path = _ask("Enter output file path", default=DEFAULT_OUTPUT_PATH)

    return DeploymentRequest(
        storage_account=storage_account,
        client_id=client_id,
        subscription_id=subscription_id or None,
        resource_group=resource_group,
        mode=mode,
        output_path=output_path or DEFAULT_OUTPUT_PATH,
    )
