"""
OpenAPI/Swagger specification loader.

References are left in place; ``SchemaResolver`` inlines them per operation.
"""
import copy
import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

import prance
import yaml
from openapi_spec_validator import validate

from crudgen.core.exceptions import OperationNotFoundError, SpecParseError
from crudgen.services.schema_resolver import lookup_pointer

logger = logging.getLogger(__name__)

HTTP_METHODS = ('get', 'post', 'put', 'patch', 'delete', 'head', 'options')


def load_spec_file(spec_path: str) -> Dict[str, Any]:
    """Read a JSON or YAML document without validating it."""
    content = Path(spec_path).read_text(encoding="utf-8")
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        return yaml.safe_load(content)


class OpenAPIParser:
    """Parser for OpenAPI specifications."""
    
    def __init__(self, spec_path: Optional[str] = None, spec_dict: Optional[Dict] = None, validate_spec: bool = True):
        """
        Initialize parser.
        
        Args:
            spec_path: Path to OpenAPI file (JSON or YAML)
            spec_dict: OpenAPI spec as dictionary
            validate_spec: Reject documents that fail OpenAPI validation
        """
        self.spec_path = spec_path
        self.spec_dict = spec_dict
        self.validate_spec = validate_spec
        self.spec: Optional[Dict] = None
        self.collections: Dict[str, Any] = {}
    
    def parse(self) -> Dict[str, Any]:
        """
        Load and validate the OpenAPI specification.
        
        Returns:
            The specification with its ``$ref`` pointers intact
        
        Raises:
            SpecParseError: unreadable or invalid document
        """
        try:
            if self.spec_path:
                if self.validate_spec:
                    # prance validates without resolving references
                    parser = prance.BaseParser(self.spec_path, backend="openapi-spec-validator", strict=False)
                    self.spec = parser.specification
                else:
                    self.spec = load_spec_file(self.spec_path)
            elif self.spec_dict is not None:
                self.spec = copy.deepcopy(self.spec_dict)
                if self.validate_spec:
                    validate(self.spec)
            else:
                raise ValueError("Either spec_path or spec_dict must be provided")
        except Exception as e:
            logger.error(f"Error parsing OpenAPI spec: {str(e)}")
            raise SpecParseError(f"Invalid OpenAPI specification: {e}") from e
        
        if not isinstance(self.spec, dict) or not isinstance(self.spec.get('paths', {}), dict):
            raise SpecParseError("OpenAPI specification must be a mapping with a 'paths' object")
        
        self._extract_collections()
        logger.info(f"Successfully parsed OpenAPI spec with {len(self.collections)} collections")
        return self.spec
    
    def _require_spec(self) -> Dict[str, Any]:
        if self.spec is None:
            raise ValueError("Spec not parsed. Call parse() first.")
        return self.spec
    
    def _extract_collections(self):
        """Extract reusable schema collections from components/schemas."""
        # OpenAPI 3.x
        if 'components' in self.spec and 'schemas' in (self.spec['components'] or {}):
            self.collections = self.spec['components']['schemas'] or {}
        
        # Swagger 2.0
        elif 'definitions' in self.spec:
            self.collections = self.spec['definitions'] or {}
    
    def get_endpoints(self) -> List[Dict[str, Any]]:
        """
        Extract all API endpoints from the spec.
        
        Returns:
            List of endpoint definitions
        """
        spec = self._require_spec()
        endpoints = []
        
        for path, path_item in (spec.get('paths') or {}).items():
            if not isinstance(path_item, dict):
                continue
            for method, operation in path_item.items():
                if method.lower() in HTTP_METHODS and isinstance(operation, dict):
                    endpoints.append({
                        'path': path,
                        'method': method.upper(),
                        'operation_id': operation.get('operationId', f"{method.upper()}_{path}"),
                        'summary': operation.get('summary', ''),
                        'parameters': operation.get('parameters', []),
                        'request_body': operation.get('requestBody', {}),
                    })
        
        return endpoints
    
    def get_operation(self, path: str, method: str) -> Dict[str, Any]:
        """Raw operation object for ``method path``."""
        spec = self._require_spec()
        path_item = (spec.get('paths') or {}).get(path)
        operation = path_item.get(method.lower()) if isinstance(path_item, dict) else None
        if not isinstance(operation, dict):
            raise OperationNotFoundError(method, path)
        return operation
    
    def get_schemas(self) -> Dict[str, Any]:
        """Get all schemas/collections."""
        return self.collections
    
    def resolve_ref(self, ref: str) -> Dict[str, Any]:
        """
        Resolve a $ref reference.
        
        Args:
            ref: Reference string (e.g., '#/components/schemas/User')
        
        Returns:
            Referenced object, unresolved inside
        
        Raises:
            ValueError: external or missing reference
        """
        return lookup_pointer(ref, self._require_spec())
