"""
Application configuration settings.
"""
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""
    
    # App
    APP_NAME: str = "CRUD API Test Data Generator"
    DEBUG: bool = False
    
    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    
    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"
    
    # LLM Defaults
    DEFAULT_LLM_PROVIDER: str = "openai"
    DEFAULT_LLM_MODEL: str = "gpt-4o-mini"
    LLM_API_KEY: str = ""  # LLM API key from environment variable
    LLM_ENDPOINT: str = ""
    LLM_TEMPERATURE: float = 0.1
    LLM_MAX_TOKENS: int = 1000
    LLM_TIMEOUT_SECONDS: float = 60.0
    
    # Test data generation
    ORACLE_MAX_ATTEMPTS: int = 3
    ORACLE_RETRY_DELAY_SECONDS: float = 1.0
    BATCH_MAX_ATTEMPTS: int = 3
    VALUE_CACHE_TTL_SECONDS: float = 3600.0  # 1 hour
    MAX_REF_DEPTH: int = 32
    GENERATION_WORKERS: int = 1
    SKIP_PARAMS_PATH: str = ""
    
    # Output
    TEST_DATA_SETS_COUNT: int = 1
    TEST_DATA_FORMAT: str = "json"
    TEST_DATA_DIR: str = "output/testData"
    
    # Monitoring
    ENABLE_METRICS: bool = True
    
    def get_cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
