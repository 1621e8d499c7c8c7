import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Lending Library")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()

    # Library behaviour
    seed_sample_data: bool = os.getenv("SEED_SAMPLE_DATA", "True").lower() in ("true", "1", "yes")
    # "reject" refuses to remove books/members with outstanding loans, "cascade" cleans the loans up
    removal_policy: str = os.getenv("REMOVAL_POLICY", "reject").lower()

    # CLI settings
    default_search_limit: int = int(os.getenv("DEFAULT_SEARCH_LIMIT", "10"))


settings = Settings()
