"""
Inline ``$ref`` pointers of an OpenAPI document into self-contained schemas.
"""
import copy
import logging
from typing import Any, Dict, FrozenSet, Optional

from crudgen.core.config import settings

logger = logging.getLogger(__name__)

COMPOSITION_KEYS = ("allOf", "anyOf", "oneOf")


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def lookup_pointer(ref: str, document: Dict[str, Any]) -> Any:
    """
    Walk a local JSON pointer (``#/a/b/c``) through ``document``.

    Raises:
        ValueError: for external references or missing targets
    """
    if not isinstance(ref, str) or not ref.startswith("#"):
        raise ValueError(f"External references not supported: {ref}")

    current: Any = document
    for part in [p for p in ref[1:].split("/") if p]:
        part = _unescape(part)
        if isinstance(current, dict) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            raise ValueError(f"Reference not found: {ref}")
    return current


class SchemaResolver:
    """Best-effort ``$ref`` resolver that stops at cycles and at a depth bound."""

    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth = settings.MAX_REF_DEPTH if max_depth is None else max_depth

    def resolve(self, schema: Any, document: Dict[str, Any]) -> Any:
        """
        Resolve ``schema`` against ``document``.

        Neither argument is mutated. Unresolvable pointers are logged and
        left in place. A ``$ref`` already being expanded on the current path is
        left unexpanded, and past ``max_depth`` nested levels the node is
        returned as-is.
        """
        return self._resolve(copy.deepcopy(schema), document, 0, frozenset())

    def _resolve(self, schema: Any, document: Dict[str, Any], depth: int, active: FrozenSet[str]) -> Any:
        if not isinstance(schema, dict):
            return schema

        if depth > self.max_depth:
            logger.warning(
                f"Schema resolution stopped at depth {depth}; "
                f"possible reference cycle near {schema.get('$ref', '<inline>')}"
            )
            return schema

        if "$ref" in schema:
            ref = schema["$ref"]
            if ref in active:
                logger.warning(f"Reference cycle at {ref}; left unresolved")
                return schema
            try:
                target = lookup_pointer(ref, document)
            except ValueError as e:
                logger.warning(f"Could not resolve $ref {ref}: {e}")
                return schema
            # The target belongs to the document, copy before touching it
            return self._resolve(copy.deepcopy(target), document, depth + 1, active | {ref})

        schema_type = schema.get("type")

        if schema_type == "array" and isinstance(schema.get("items"), dict):
            schema["items"] = self._resolve(schema["items"], document, depth + 1, active)

        if (schema_type == "object" or schema_type is None) and isinstance(schema.get("properties"), dict):
            schema["properties"] = {
                name: self._resolve(prop, document, depth + 1, active)
                for name, prop in schema["properties"].items()
            }

        for key in COMPOSITION_KEYS:
            members = schema.get(key)
            if isinstance(members, list):
                schema[key] = [self._resolve(member, document, depth + 1, active) for member in members]

        return schema


def resolve_schema(schema: Any, document: Dict[str, Any], max_depth: Optional[int] = None) -> Any:
    """Module-level shortcut for ``SchemaResolver(max_depth).resolve``."""
    return SchemaResolver(max_depth).resolve(schema, document)
