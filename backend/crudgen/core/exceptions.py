"""
Exception types raised by the test data generation core.
"""
from typing import List


class CrudGenError(Exception):
    """Base error for the generator."""


class SpecParseError(CrudGenError):
    """The OpenAPI document could not be loaded or failed validation."""


class OperationNotFoundError(CrudGenError):
    """The requested method/path pair is not declared in the document."""

    def __init__(self, method: str, path: str):
        self.method = method.upper()
        self.path = path
        super().__init__(f"Operation not found: {self.method} {path}")


class OracleError(CrudGenError):
    """The LLM oracle could not be reached or returned an error."""


class OracleResponseError(CrudGenError, ValueError):
    """The oracle answered but the generated value could not be extracted."""


class DataGenerationError(CrudGenError):
    """
    A test case batch stayed invalid after every re-assembly attempt.

    Carries the violation messages of the last attempt so the schema or the
    oracle prompt can be inspected.
    """

    def __init__(self, operation: str, violations: List[str]):
        self.operation = operation
        self.violations = list(violations)
        details = "; ".join(self.violations) or "no details"
        super().__init__(
            f"Failed to generate valid test data for {operation}: {details}"
        )
