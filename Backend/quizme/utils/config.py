from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    openai_api_key: Optional[str] = None
    openai_api_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    request_timeout: float = 30.0
    max_tokens: int = 3000
    temperature: float = 0.7
    max_document_chars: int = 8000
    min_text_length: int = 100
    max_upload_mb: int = 10
    environment: str = "development"
    cors_origins: str = "*"  # comma separated
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def expose_error_details(self) -> bool:
        return self.environment != "production"

settings = Settings()
