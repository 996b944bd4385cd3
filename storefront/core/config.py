# storefront/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # --- API Info ---
    API_TITLE: str = "Storefront API"
    API_DESCRIPTION: str = "Catalogue, shopping cart and order checkout for the storefront."
    API_VERSION: str = "1.0.0"

    # --- Server Configuration ---
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")

    # --- Database ---
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
    # Create tables on startup (there is no migration tooling)
    AUTO_CREATE_TABLES: bool = os.getenv("AUTO_CREATE_TABLES", "1") == "1"

    # --- Identity provider tokens ---
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY") or "dev-secret-change-me"
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
    ADMIN_ROLE: str = os.getenv("ADMIN_ROLE", "Admin")

    # --- HTTP ---
    CORS_ORIGINS: list = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:4200,http://127.0.0.1:4200").split(",")
        if origin.strip()
    ]

    # --- Logging ---
    LOG_CONFIG_FILE: str = os.getenv("LOG_CONFIG_FILE", "logging.conf")


settings = Settings()
