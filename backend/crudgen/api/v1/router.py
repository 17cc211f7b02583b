"""
API v1 router.
"""
from fastapi import APIRouter

from crudgen.api.v1.endpoints import test_data

api_router = APIRouter()

api_router.include_router(test_data.router, prefix="/test-data", tags=["test-data"])
