from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "URI Locale Negotiator"
    app_version: str = "0.4.0"
    debug: bool = False
    environment: str = "development"

    # Locale negotiation
    default_locale: str = "en"
    supported_locales: list[str] = ["en"]
    home_path_template: str | None = None
    redirect_status_code: int = 302
    exclude_paths: list[str] = ["/health", "/docs", "/redoc", "/openapi.json"]

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True

    model_config = SettingsConfigDict(
        env_prefix="LOCALE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
