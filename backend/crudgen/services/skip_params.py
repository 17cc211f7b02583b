"""
Loader for the list of fields excluded from test data generation.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Set, Union

import yaml

logger = logging.getLogger(__name__)


@dataclass
class SkipParameters:
    """Field names excluded from parameters and from the request body."""
    parameters: Set[str] = field(default_factory=set)
    request_body: Set[str] = field(default_factory=set)


def _names(entries: Any, section: str) -> Set[str]:
    if entries is None:
        return set()
    if not isinstance(entries, list):
        raise ValueError(f"'{section}' must be a list of field names, got {type(entries).__name__}")
    return {str(name) for name in entries}


def load_skip_parameters(skip_file_path: Optional[Union[str, Path]]) -> SkipParameters:
    """
    Load a JSON/YAML skip list.
    
    The file holds either a flat list (applied to parameters and request
    body alike) or ``{parameters: [...], requestBody: [...]}``. A missing
    file yields empty sets; a malformed one is logged and yields empty sets.
    """
    if not skip_file_path:
        return SkipParameters()
    
    path = Path(skip_file_path)
    if not path.exists():
        return SkipParameters()
    
    try:
        content = path.read_text(encoding="utf-8")
        extension = path.suffix.lower()
        if extension in (".yaml", ".yml"):
            skip_config = yaml.safe_load(content)
        elif extension == ".json":
            skip_config = json.loads(content)
        else:
            raise ValueError("Unsupported file format. Use .yaml, .yml, or .json")
        
        if skip_config is None:
            return SkipParameters()
        if isinstance(skip_config, list):
            names = _names(skip_config, "skip list")
            return SkipParameters(parameters=set(names), request_body=set(names))
        if isinstance(skip_config, dict):
            return SkipParameters(
                parameters=_names(skip_config.get("parameters"), "parameters"),
                request_body=_names(skip_config.get("requestBody"), "requestBody"),
            )
        raise ValueError(f"Expected a list or a mapping, got {type(skip_config).__name__}")
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning(f"Error loading skip parameters from {path}: {e}")
        return SkipParameters()
