"""Validation and normalization of deployment requests."""
import re
from typing import Optional, Union

from .schema import (
    DEFAULT_MODE,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_RESOURCE_GROUP,
    DeploymentMode,
    DeploymentRequest,
    ValidatedRequest,
)
from ..errors import InvalidFieldValue, InvalidMode, MissingRequiredField

MODE_ALIASES = {
    "single": DeploymentMode.SINGLE_BINARY,
    "singlebinary": DeploymentMode.SINGLE_BINARY,
    "distributed": DeploymentMode.DISTRIBUTED,
    "dist": DeploymentMode.DISTRIBUTED,
}

# Azure storage account names: 3-24 lowercase letters and digits
STORAGE_ACCOUNT_PATTERN = re.compile(r"[a-z0-9]{3,24}")
RESOURCE_GROUP_PATTERN = re.compile(r"[-\w.()]{1,90}", re.ASCII)
SUBSCRIPTION_ID_PATTERN = re.compile(r"[A-Za-z0-9-]+")
CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _check(field: str, value: str, pattern: "re.Pattern", reason: str) -> None:
    if not pattern.fullmatch(value):
        raise InvalidFieldValue(field, value, reason)


def normalize_mode(value: Optional[Union[DeploymentMode, str]]) -> DeploymentMode:
    """Map a user supplied mode string onto a DeploymentMode.

    Args:
        value: Mode name, alias or None.

    Returns:
        DeploymentMode: The recognized mode, SingleBinary when value is unset.

    Raises:
        InvalidMode: If the value is not a recognized alias.
    """
    if isinstance(value, DeploymentMode):
        return value
    if _blank(value):
        return DEFAULT_MODE
    mode = MODE_ALIASES.get(value.strip().lower())
    if mode is None:
        raise InvalidMode(value)
    return mode


def validate(request: DeploymentRequest) -> ValidatedRequest:
    """Check required fields and apply defaults.

    Args:
        request: Raw deployment request.

    Returns:
        ValidatedRequest: Request with every field populated.

    Raises:
        MissingRequiredField: If storageAccount or clientId is missing.
        InvalidMode: If the mode is not recognized.
        InvalidFieldValue: If an identifier has an unsafe format.
    """
    if _blank(request.storage_account):
        raise MissingRequiredField("storageAccount")
    if _blank(request.client_id):
        raise MissingRequiredField("clientId")

    storage_account = request.storage_account.strip()
    client_id = request.client_id.strip()
    subscription_id = None if _blank(request.subscription_id) else request.subscription_id.strip()
    resource_group_supplied = not _blank(request.resource_group)
    resource_group = request.resource_group.strip() if resource_group_supplied else DEFAULT_RESOURCE_GROUP

    _check("storageAccount", storage_account, STORAGE_ACCOUNT_PATTERN,
           "expected 3-24 lowercase letters and digits")
    if CONTROL_CHARACTERS.search(client_id):
        raise InvalidFieldValue("clientId", client_id, "control characters are not allowed")
    if subscription_id is not None:
        _check("subscriptionId", subscription_id, SUBSCRIPTION_ID_PATTERN,
               "expected letters, digits and hyphens")
    _check("resourceGroup", resource_group, RESOURCE_GROUP_PATTERN,
           "expected up to 90 letters, digits, underscores, hyphens, periods or parentheses")

    mode = normalize_mode(request.mode)
    return ValidatedRequest(
        storage_account=storage_account,
        client_id=client_id,
        subscription_id=subscription_id,
        resource_group=resource_group,
        resource_group_supplied=resource_group_supplied,
        mode=mode,
        output_path=DEFAULT_OUTPUT_PATH if _blank(request.output_path) else request.output_path,
    )
