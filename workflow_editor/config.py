# workflow_editor/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Workflow Editor"
    environment: str = "development"
    debug: bool = False

    # Reentrancy lock is released this long after the last acquisition
    guard_reset_delay: float = Field(default=0.05, ge=0)
    # Quiet period before a raw-text edit is parsed and applied
    text_edit_debounce: float = Field(default=0.5, ge=0)

    default_node_x: float = 200.0
    default_node_y: float = 200.0

    export_indent: int = 2
    export_filename: str = "workflow.json"

    log_level: str = "INFO"
    log_json: bool = False

    api_prefix: str = "/api/editor"

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_EDITOR_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
