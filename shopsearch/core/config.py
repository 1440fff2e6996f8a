"""
Configuration settings for the search and recommendation engine
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings"""

    # Application
    app_name: str = "Shopsearch Engine"
    version: str = "1.0.0"
    environment: str = "development"

    # Catalog / index
    max_catalog_size: int = 50000
    candidate_pool_size: int = 50
    default_result_limit: int = 10

    # Session state
    view_history_size: int = 20
    search_history_size: int = 10
    conversation_capacity: int = 10
    context_turns: int = 5
    price_range_expansion: float = 0.2  # +/-20% around viewed prices
    session_ttl_hours: int = 24

    # Response templates
    currency: str = "RWF"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    class Config:
        env_prefix = "SHOPSEARCH_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
