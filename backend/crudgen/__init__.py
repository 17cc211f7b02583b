"""
CRUD API test data generation from OpenAPI/Swagger specifications.
"""
__version__ = "0.1.0"
