import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path
import logging

# Define the base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Load .env file from the project root
load_dotenv(dotenv_path=BASE_DIR / ".env")

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    PROJECT_NAME: str = "AI Smart Product Comparison"
    VERSION: str = "0.1.0"
    DESCRIPTION: str = "Build a specification framework, extract product data from documents and score candidates."

    # Comparison server
    SERVER_HOST: str = os.getenv("SERVER_HOST", "127.0.0.1")
    SERVER_PORT: int = int(os.getenv("SERVER_PORT", 8001))

    SERVER_URL: Optional[str] = None # Allow it to be set or computed

    # Extraction
    RAW_TEXT_EXCERPT_CHARS: int = int(os.getenv("RAW_TEXT_EXCERPT_CHARS", 2000))

    # Session persistence (JSON key-value file)
    SESSION_FILE: Path = BASE_DIR / "session_store.json"
    SESSION_KEY: str = os.getenv("SESSION_KEY", "aiComparisonData")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: Path = BASE_DIR / "smartcompare_server.log"

    # Temp file storage for uploads
    UPLOAD_DIR: Path = BASE_DIR / "uploads"

    class Config:
        case_sensitive = True

try:
    settings = Settings()
    if settings.SERVER_URL is None:
        settings.SERVER_URL = f"http://{settings.SERVER_HOST}:{settings.SERVER_PORT}"

except Exception as e:
    logger.error(f"Configuration error: {e}. Please check your .env file or Settings model.")
    raise

# Ensure upload directory exists
settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

logger.info(f"Settings loaded. Comparison server URL will be: {settings.SERVER_URL}")
