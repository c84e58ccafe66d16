"""Azure provisioning script generator."""
import shlex
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from jinja2 import BaseLoader, Environment, StrictUndefined

from ..manifest.builders.loki_config import ADMIN_CONTAINER, CHUNKS_CONTAINER, RULER_CONTAINER
from ..manifest.builders.service_account import SERVICE_ACCOUNT_NAME
from ..errors import InvalidFieldValue
from ..request.schema import ValidatedRequest
from ..request.validator import STORAGE_ACCOUNT_PATTERN

DEFAULT_LOCATION = "norwayeast"
DEFAULT_CLUSTER_NAME = "ote-demo"

def _account_name(request: ValidatedRequest) -> str:
    # Used as a file name and in shell comments
    if not STORAGE_ACCOUNT_PATTERN.fullmatch(request.storage_account):
        raise InvalidFieldValue("storageAccount", request.storage_account,
                                "expected 3-24 lowercase letters and digits")
    return request.storage_account

# Embedded setup script template
SETUP_TEMPLATE = """#!/bin/bash

# Generated Azure setup script for Loki
# Storage Account: {{ storage_account }}
# Generated on: {{ generated_at }}

set -e

# Configuration
export RESOURCE_GROUP={{ resource_group | shquote }}
export LOCATION="${LOCATION:-{{ location }}}"
export ACCOUNT_NAME={{ storage_account | shquote }}
export CLUSTER_NAME="${CLUSTER_NAME:-{{ cluster_name }}}"
export SUBSCRIPTION_ID={{ subscription_id | shquote }}

log_info() {
    echo "[INFO] $1"
}

log_success() {
    echo "[SUCCESS] $1"
}

log_error() {
    echo "[ERROR] $1"
    exit 1
}

# Check prerequisites
if ! command -v az &> /dev/null; then
    log_error "Azure CLI is not installed"
fi

log_info "Creating resource group..."
az group create --name $RESOURCE_GROUP --location $LOCATION

log_info "Creating AKS cluster..."
az aks create \\
  --resource-group $RESOURCE_GROUP \\
  --name $CLUSTER_NAME \\
  --node-count 3 \\
  --enable-workload-identity \\
  --enable-oidc-issuer

log_info "Creating storage account..."
az storage account create \\
  --name $ACCOUNT_NAME \\
  --location $LOCATION \\
  --sku Standard_ZRS \\
  --encryption-services blob \\
  --resource-group $RESOURCE_GROUP

log_info "Creating storage containers..."
{% for container in containers %}
az storage container create --account-name $ACCOUNT_NAME --name {{ container | shquote }}
{% endfor %}

log_info "Getting OIDC issuer URL..."
export OIDC=$(az aks show \\
  --resource-group $RESOURCE_GROUP \\
  --name $CLUSTER_NAME \\
  --query "oidcIssuerProfile.issuerUrl" \\
  -o tsv)

echo "OIDC Issuer URL: $OIDC"

log_info "Creating Azure AD application..."
export APP_ID=$(az ad app create \\
  --display-name loki \\
  --query appId \\
  -o tsv)

echo "Azure AD App ID: $APP_ID"

log_info "Creating federated credential..."
cat > credentials-render.json << CRED_EOF
{
    "name": "LokiFederatedIdentity",
    "issuer": "$OIDC",
    "subject": "{{ subject }}",
    "description": "Federated identity for Loki accessing Azure resources",
    "audiences": [
      "api://AzureADTokenExchange"
    ]
}
CRED_EOF

az ad app federated-credential create \\
  --id $APP_ID \\
  --parameters credentials-render.json

log_info "Assigning storage permissions..."
az role assignment create \\
  --role "Storage Blob Data Contributor" \\
  --assignee $APP_ID \\
  --scope /subscriptions/$SUBSCRIPTION_ID/resourceGroups/$RESOURCE_GROUP/providers/Microsoft.Storage/storageAccounts/$ACCOUNT_NAME

log_success "Azure setup completed!"
log_info "Next steps:"
log_info "1. Update your Loki configuration with Client ID: $APP_ID"
log_info "2. Deploy Loki using the generated configuration file"
log_info "3. Run the validation script to verify the setup"
"""

class SetupScriptGenerator:
    """Renders the companion Azure provisioning script for a request."""

    def __init__(self, location: str = DEFAULT_LOCATION, cluster_name: str = DEFAULT_CLUSTER_NAME):
        """Initialize the generator.

        Args:
            location: Azure region used when LOCATION is unset at run time.
            cluster_name: AKS cluster name used when CLUSTER_NAME is unset at run time.
        """
        self.location = location
        self.cluster_name = cluster_name
        self.jinja_env = Environment(
            loader=BaseLoader(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.jinja_env.filters["shquote"] = shlex.quote

    @staticmethod
    def script_path(request: ValidatedRequest) -> Path:
        """Path of the setup script, next to the manifest output."""
        return Path(request.output_path).parent / f"setup-azure-{_account_name(request)}.sh"

    def render(self, request: ValidatedRequest, generated_at: Optional[datetime] = None) -> str:
        """Render the setup script text.

        Args:
            request: Validated request carrying resource group and subscription.
            generated_at: Timestamp embedded in the header; defaults to now.

        Returns:
            str: Bash script content.

        Raises:
            InvalidFieldValue: If the storage account name is not a valid Azure name.
        """
        generated_at = generated_at or datetime.now(timezone.utc)
        template = self.jinja_env.from_string(SETUP_TEMPLATE)
        return template.render(
            storage_account=_account_name(request),
            resource_group=request.resource_group,
            subscription_id=request.subscription_id or "your-subscription-id",
            location=self.location,
            cluster_name=self.cluster_name,
            containers=[CHUNKS_CONTAINER, RULER_CONTAINER, ADMIN_CONTAINER],
            subject=f"system:serviceaccount:loki:{SERVICE_ACCOUNT_NAME}",
            generated_at=generated_at.isoformat(),
        )
