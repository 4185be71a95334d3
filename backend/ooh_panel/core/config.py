from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "OOH Inventory Panel"
    database_url: str = Field(..., alias="DATABASE_URL")
    secret_key: str = Field(..., alias="SECRET_KEY")
    access_token_expire_minutes: int = Field(1440, alias="ACCESS_TOKEN_EXPIRE_MINUTES")  # default: 1 day
    algorithm: str = "HS256"
    timezone: str = Field("Asia/Manila", alias="TIMEZONE")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    loop_suggestion_max_offset: int = Field(5, alias="LOOP_SUGGESTION_MAX_OFFSET")
    loop_suggestions_per_field: int = Field(2, alias="LOOP_SUGGESTIONS_PER_FIELD")
    import_max_rows: int = Field(5000, alias="IMPORT_MAX_ROWS")
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost",
            "http://127.0.0.1",
        ],
        alias="CORS_ORIGINS",
    )


def get_settings() -> Settings:
    return Settings()
