from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True

    # Application
    app_name: str = "URL Resolver"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Redirect resolution
    max_redirects: int = 10  # Hops followed before giving up
    request_timeout: float = 10.0  # Seconds, per HEAD/GET request
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )

    # Resolution store
    store_backend: str = "memory"  # Options: "memory", "sql"
    database_url: str = "sqlite:///./resolved_urls.db"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
