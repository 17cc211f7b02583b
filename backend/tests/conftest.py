"""
Shared fixtures for the test data generator tests.
"""
import json
from typing import Any, Dict, List, Union

import pytest

from crudgen.core.exceptions import OracleError
from crudgen.services.fallback import FallbackValueGenerator
from crudgen.services.value_cache import ValueCache
from crudgen.services.value_generator import ValueGenerator


def oracle_reply(field_name: str, value: Any) -> str:
    """Raw oracle text wrapping ``{field_name: value}`` in the markers."""
    return (
        "Here is the value.\n"
        "START GENERATED DATA\n"
        f"{json.dumps({field_name: value})}\n"
        "END GENERATED DATA"
    )


class ScriptedOracle:
    """Oracle returning canned replies in order; exceptions are raised."""

    def __init__(self, replies: List[Union[str, Exception]]):
        self.replies = list(replies)
        self.prompts: List[str] = []

    def invoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise OracleError("no scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def value_cache(clock):
    return ValueCache(ttl_seconds=3600, clock=clock)


@pytest.fixture
def fallback():
    return FallbackValueGenerator(seed=1234)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_generator(value_cache, fallback, sleeps):
    """Factory for value generators sharing the test's cache."""
    def _make(oracle=None, retry_delay=1.0):
        return ValueGenerator(
            cache=value_cache,
            oracle=oracle,
            fallback=fallback,
            max_attempts=3,
            retry_delay=retry_delay,
            sleep=sleeps.append,
        )
    return _make


@pytest.fixture
def user_spec() -> Dict[str, Any]:
    """OpenAPI 3 document with a user resource."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Users API", "version": "1.0.0"},
        "paths": {
            "/users": {
                "get": {
                    "operationId": "findUserByEmail",
                    "parameters": [
                        {
                            "name": "email",
                            "in": "query",
                            "required": True,
                            "schema": {"type": "string", "format": "email"},
                        },
                        {
                            "name": "limit",
                            "in": "query",
                            "required": False,
                            "schema": {"type": "integer", "minimum": 1, "maximum": 50},
                        },
                    ],
                    "responses": {"200": {"description": "Matching users"}},
                },
                "post": {
                    "operationId": "createUser",
                    "requestBody": {
                        "required": True,
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/User"}
                            }
                        },
                    },
                    "responses": {"201": {"description": "Created"}},
                },
            },
            "/users/{userId}": {
                "parameters": [
                    {
                        "name": "userId",
                        "in": "path",
                        "required": True,
                        "schema": {"type": "string"},
                    }
                ],
                "get": {
                    "operationId": "getUser",
                    "responses": {"200": {"description": "The user"}},
                },
                "delete": {
                    "operationId": "deleteUser",
                    "responses": {"204": {"description": "Deleted"}},
                },
            },
        },
        "components": {
            "schemas": {
                "User": {
                    "type": "object",
                    "required": ["email", "name", "role", "age"],
                    "properties": {
                        "email": {"type": "string", "format": "email"},
                        "name": {"type": "string", "minLength": 1, "maxLength": 60},
                        "role": {"$ref": "#/components/schemas/Role"},
                        "age": {"type": "integer", "minimum": 18, "maximum": 99},
                        "nickname": {"type": "string"},
                        "address": {"$ref": "#/components/schemas/Address"},
                    },
                },
                "Role": {"type": "string", "enum": ["admin", "member"]},
                "Address": {
                    "type": "object",
                    "properties": {
                        "street": {"type": "string"},
                        "city": {"type": "string"},
                    },
                },
            }
        },
    }
