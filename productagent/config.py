from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Gemini API (key is sent as the `key` query parameter)
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"

    # Agent models
    COPY_MODEL: str = "gemini-2.5-flash-preview-09-2025"  # Copywriter: text generation
    STUDIO_MODEL: str = "gemini-2.5-flash-image-preview"  # Studio: image generation

    # Request timeouts (seconds)
    COPY_TIMEOUT: float = 30
    STUDIO_TIMEOUT: float = 120  # Image generation takes longer

    # Uploads
    MAX_UPLOAD_SIZE: int = 20 * 1024 * 1024
    DEFAULT_MIME_TYPE: str = "image/jpeg"

    # Web server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_api_key_configured(self) -> bool:
        return bool(self.GEMINI_API_KEY)

settings = Settings()
