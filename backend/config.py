from pathlib import Path

from pydantic_settings import BaseSettings

_SHARED_DIR = Path(__file__).resolve().parent.parent / "shared"


class Settings(BaseSettings):
    DB_PATH: str = "tracker.db"
    CATALOG_PATH: str = str(_SHARED_DIR / "ifac_tcs.json")

    # Preference key holding the JSON-encoded user topic list
    USER_TCS_KEY: str = "user_tcs_json"

    HOST: str = "127.0.0.1"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
