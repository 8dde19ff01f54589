from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Ensure environment variables from the repository root .env are available
# regardless of the working directory used to start the process.
ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


class Settings(BaseSettings):
  azure_openai_api_key: str | None = Field(default=None, alias="AZURE_OPENAI_API_KEY")
  azure_openai_endpoint: str = Field(default="", alias="AZURE_OPENAI_ENDPOINT")
  azure_openai_api_version: str = Field(default="2024-12-01-preview", alias="AZURE_OPENAI_API_VERSION")
  azure_openai_deployment_name: str | None = Field(default=None, alias="AZURE_OPENAI_DEPLOYMENT_NAME")
  azure_openai_vision_model: str | None = Field(default=None, alias="AZURE_OPENAI_VISION_MODEL")
  vision_max_completion_tokens: int = Field(default=16000, alias="VISION_MAX_COMPLETION_TOKENS")
  pdf_render_zoom: float = Field(default=2.0, alias="PDF_RENDER_ZOOM")
  max_upload_mb: float = Field(default=10.0, alias="MAX_UPLOAD_MB")
  cors_allow_origins: str = Field(default="*", alias="CORS_ALLOW_ORIGINS")

  def ensure_endpoint(self) -> str:
    endpoint = (self.azure_openai_endpoint or "").strip()
    if not endpoint:
        return ""
    return endpoint.rstrip("/") + "/"

  def vision_model(self) -> str | None:
    return self.azure_openai_vision_model or self.azure_openai_deployment_name

  def max_upload_bytes(self) -> int:
    return int(self.max_upload_mb * 1024 * 1024)

  def allowed_origins(self) -> list[str]:
    return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]

  class Config:
    case_sensitive = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings()  # type: ignore[arg-type]
