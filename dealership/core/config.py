import os
from dotenv import load_dotenv
from pathlib import Path

# Project root is two levels above this file (dealership/core/config.py).
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH)

class Settings:
    """
    A class to hold all application settings.
    It reads settings from environment variables and .env file.
    """
    # --- Project Settings ---
    PROJECT_NAME: str = "Car Dealership API"
    VERSION: str = "0.1.0"
    API_PREFIX: str = os.getenv("API_PREFIX", "/api/v1")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS: list[str] = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

    # --- Database Settings ---
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # --- JWT Settings ---
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "default_secret_key")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

    # --- Form client Settings ---
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000/api/v1")
    API_TIMEOUT: float = float(os.getenv("API_TIMEOUT", "10.0"))

settings = Settings()

if not settings.DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is not set.")
if settings.JWT_SECRET_KEY == "default_secret_key":
    print("WARNING: JWT_SECRET_KEY is not set in .env file. Using a default, non-secure key.")
