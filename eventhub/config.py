from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PKG_DIR = Path(__file__).resolve().parent
ENV_PATH = PKG_DIR / ".env"

_DEV_ENVS = {"dev", "development"}


class Settings(BaseSettings):
    # App
    app_env: str = Field("dev", validation_alias="APP_ENV")

    # Database (sqlite file path or sqlite:///path)
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

    # Asset host
    cloudinary_cloud_name: str | None = Field(
        default=None, validation_alias="CLOUDINARY_CLOUD_NAME"
    )
    cloudinary_api_key: str | None = Field(
        default=None, validation_alias="CLOUDINARY_API_KEY"
    )
    cloudinary_api_secret: str | None = Field(
        default=None, validation_alias="CLOUDINARY_API_SECRET"
    )
    upload_folder: str = Field("DevEvents", validation_alias="UPLOAD_FOLDER")

    # Page rendering
    public_base_url: str | None = Field(
        default=None, validation_alias="PUBLIC_BASE_URL"
    )

    # HTTP client
    http_timeout_seconds: float = Field(
        8.0, validation_alias="HTTP_TIMEOUT_SECONDS"
    )
    http_max_retries: int = Field(
        4, validation_alias="HTTP_MAX_RETRIES"
    )

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.app_env.strip().lower() in _DEV_ENVS


settings = Settings()
