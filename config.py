from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    # Host platform API
    PLATFORM_API_URL: str = "http://localhost:8080/v1"  # Change this to the platform API in production

    # Header carrying the runtime environment on forwarded fetch requests
    RUNTIME_ENVIRONMENT_HEADER: str = "X-Runtime-Environment"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Security
    SECRET_KEY: str = "your-secret-key-here"  # Change this in production!

    # Visitor authentication tokens
    VISITOR_TOKEN_EXPIRY_SECONDS: int = 3600
    VISITOR_TOKEN_ALGORITHM: str = "HS256"

    # Plugin System Settings
    PLUGINS_AUTO_DISCOVER: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"  # Allow extra fields from environment variables

@lru_cache()
def get_settings():
    return Settings()
