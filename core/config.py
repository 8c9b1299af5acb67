"""
Configuration loader for AuctionBridge.
Loads environment variables from .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv


# Load .env from the project root
PROJECT_ROOT = Path(__file__).parent.parent
ENV_PATH = PROJECT_ROOT / ".env"
load_dotenv(ENV_PATH)


class Config:
    """Application configuration."""
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017/auctionbridge")
    DATABASE_NAME: str = os.getenv("DATABASE_NAME", "auctionbridge")

    # Translation (OpenAI-compatible chat completions)
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    OPENAI_TRANSLATE_MODEL: str = os.getenv("OPENAI_TRANSLATE_MODEL", "gpt-4o-mini")
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.2"))
    LLM_TIMEOUT_SECONDS: int = int(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
    TRANSLATE_SOURCE_LANG: str = os.getenv("YAHOO_TRANSLATE_SOURCE_LANG", "ja")
    TRANSLATE_TARGET_LANG: str = os.getenv("YAHOO_TRANSLATE_TARGET_LANG", "zh-CN")

    # Auction page fetching
    FETCHER: str = os.getenv("YAHOO_FETCHER", "http")
    FETCH_TIMEOUT_SECONDS: int = int(os.getenv("FETCH_TIMEOUT_SECONDS", "30"))
    # curl_cffi browser fingerprint for the http fetcher
    FETCH_IMPERSONATE: str = os.getenv("FETCH_IMPERSONATE", "chrome110")
    FETCH_USER_AGENT: str = os.getenv(
        "FETCH_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
    )

    # HTTP API
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "9000"))


# Singleton instance
config = Config()
