# File: /taskgrid/core/config.py | Version: 1.3 | Title: Central App Settings (Pydantic v2)
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Database (state service) ---
    DATABASE_URL: str = "sqlite:///./taskgrid.db"

    # --- Remote state service (client side) ---
    STATE_SERVICE_URL: str = "http://localhost:8000"
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # --- Sync cadence ---
    PUSH_DEBOUNCE_SECONDS: float = 0.5
    PULL_INTERVAL_SECONDS: float = 5.0

    # --- Record semantics ---
    TERMINAL_STATUS_ID: str = "done"

    # --- API behavior toggles ---
    SERVICE_NAME: str = "taskgrid-state"
    ENABLE_STD_ERRORS: bool = (
        False  # set True in .env to enable standardized error responses
    )

    # v2-style config
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
