"""
Configuration settings for the scan & bonus backend
"""
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings using pydantic-settings"""

    # Server settings
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = True

    # CORS settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Project paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # Configuration store (JSON documents)
    SCAN_CONFIG_FILE: Path = DATA_DIR / "scan_config.json"
    GRADING_SYSTEMS_FILE: Path = DATA_DIR / "grading_systems.json"
    BONUS_FACTORS_FILE: Path = DATA_DIR / "bonus_factors.json"

    # Scan limits
    MAX_SCANS_PER_HOUR: int = 20
    RATE_LIMIT_WINDOW_SECONDS: int = 3600

    # OCR settings
    TESSERACT_CMD: Optional[str] = None
    OCR_DEFAULT_LOCALE: str = "en"

    class Config:
        env_file = ".env"
        extra = "allow"


settings = Settings()

# Ensure directories exist
settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
