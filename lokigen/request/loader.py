"""YAML request file loader."""
import yaml
from typing import Any, Dict

from .schema import DeploymentRequest

class RequestLoader:
    """Loads deployment requests from YAML files and merges overrides."""
    
    @staticmethod
    def load(file_path: str) -> DeploymentRequest:
        """Load a YAML request file.
        
        Args:
            file_path: Path to the YAML request file.
            
        Returns:
            DeploymentRequest: Parsed, not yet validated, request.
            
        Raises:
            FileNotFoundError: If the request file doesn't exist.
            ValidationError: If the file contains unknown keys or is not a mapping.
            yaml.YAMLError: If the YAML is malformed.
        """
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
        # An empty document is an empty request
        return DeploymentRequest.model_validate(data if data is not None else {})
    
    @staticmethod
    def merge(base: DeploymentRequest, overrides: Dict[str, Any]) -> DeploymentRequest:
        """Overlay explicitly supplied values onto a base request.
        
        Args:
            base: Request loaded from a file or an empty request.
            overrides: Field name to value; None values are ignored.
            
        Returns:
            DeploymentRequest: New request with overrides applied.
        """
        updates = {k: v for k, v in overrides.items() if v is not None}
        return base.model_copy(update=updates)
