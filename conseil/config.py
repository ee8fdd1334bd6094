from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App info
    app_name: str = "Conseil Backend"
    app_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # Claude API
    anthropic_api_key: str = ""
    claude_model: str = "claude-3-5-haiku-20241022"
    max_tokens: int = 2048
    temperature: float = 0.3
    provider_timeout: float = 120.0  # seconds

    # OpenAI (speech and image synthesis)
    openai_api_key: str = ""
    tts_model: str = "tts-1"
    tts_voice: str = "alloy"
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"

    # Legal knowledge file, read once at startup
    knowledge_path: str = "legalDb.txt"

    # Static files and generated media
    static_dir: str = "public"
    media_subdir: str = "generated"
    media_naming: str = "per_request"  # or "fixed" to overwrite output.* in place

    # Uploads
    upload_dir: str = "uploads"
    max_upload_mb: int = 10

    # CORS
    cors_allow_origins: List[str] = ["https://quentinrls.github.io"]
    cors_allow_methods: List[str] = ["GET", "POST", "OPTIONS"]
    cors_allow_headers: List[str] = ["Content-Type"]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
