from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Storefront API"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["*"]

    # MongoDB
    database_url: str = "mongodb://localhost:27017"
    database_name: str = "storefront"

    # Credentials: "plaintext" or "hashed"
    credential_scheme: str = "plaintext"
    password_schemes: List[str] = ["bcrypt"]

    # Catalog
    items_page_size: int = 8

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
