"""Pydantic models for deployment requests."""
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_RESOURCE_GROUP = "otel-demo"
DEFAULT_OUTPUT_PATH = "loki-generated.yaml"


class DeploymentMode(str, Enum):
    """Loki deployment topology."""
    SINGLE_BINARY = "SingleBinary"
    DISTRIBUTED = "Distributed"


DEFAULT_MODE = DeploymentMode.SINGLE_BINARY


class DeploymentRequest(BaseModel):
    """Raw deployment parameters as collected from flags, prompts or a file.

    Every field may be missing here; ``validate`` decides what is required.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    storage_account: Optional[str] = Field(default=None, alias="storageAccount")
    client_id: Optional[str] = Field(default=None, alias="clientId")
    subscription_id: Optional[str] = Field(default=None, alias="subscriptionId")
    resource_group: Optional[str] = Field(default=None, alias="resourceGroup")
    mode: Optional[Union[DeploymentMode, str]] = None
    output_path: Optional[str] = Field(default=None, alias="outputPath")


class ValidatedRequest(BaseModel):
    """Fully populated request with defaults applied."""
    model_config = ConfigDict(frozen=True)

    storage_account: str
    client_id: str
    subscription_id: Optional[str] = None
    resource_group: str = DEFAULT_RESOURCE_GROUP
    resource_group_supplied: bool = False
    mode: DeploymentMode = DEFAULT_MODE
    output_path: str = DEFAULT_OUTPUT_PATH

    @property
    def wants_setup_script(self) -> bool:
        """Whether enough Azure details were given to emit the setup script."""
        return self.resource_group_supplied and bool(self.subscription_id)
