"""Unified settings for photo-relay."""

import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict."""
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(base_dir: Path) -> str:
    """Get version from git tags or fallback to package metadata."""
    try:
        import git

        repo = git.Repo(base_dir, search_parent_directories=True)
        latest_tag = max(repo.tags, key=lambda t: t.commit.committed_datetime, default=None)
        return str(latest_tag) if latest_tag else "0.0.0"
    except Exception:
        try:
            import importlib.metadata

            return importlib.metadata.version("photo-relay")
        except Exception:
            return "0.0.0"


class Settings(BaseSettings):
    """Unified settings for the photo-relay service."""

    DEBUG: bool = True
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "photo-relay")
    API_DESCRIPTION: ClassVar[str] = PROJECT.get("project", {}).get("description", "Photo upload relay")
    API_VERSION: ClassVar[str] = get_version(BASE_DIR)

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Object storage. Credentials left unset fall back to the boto3 credential chain.
    AWS_ACCESS_KEY_ID: str | None = None
    AWS_SECRET_ACCESS_KEY: str | None = None
    AWS_REGION: str | None = None
    S3_ENDPOINT_URL: str | None = None
    S3_BUCKET_NAME: str = ""

    # Delivery
    CLOUDFRONT_DOMAIN: str = ""
    STORAGE_NAMESPACE: str = "photo-uploader"
    CACHE_CONTROL: str = "max-age=31536000"

    # Uploads
    DEFAULT_USER_ID: str = "default-user"

    @property
    def api_url(self) -> str:
        return f"http://{self.API_HOST}:{self.API_PORT}"

    @property
    def storage_configured(self) -> bool:
        return bool(self.S3_BUCKET_NAME and self.CLOUDFRONT_DOMAIN)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()  # type: ignore
