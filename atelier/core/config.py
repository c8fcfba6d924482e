from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str | None = None
    AI_PROVIDER: str = "auto"  # "auto" | "openai" | "mock"

    OPENAI_MODEL_DETAILS: str = "gpt-4o-mini"
    OPENAI_MODEL_VISION: str = "gpt-4o-mini"
    OPENAI_MODEL_IMAGE: str = "gpt-image-1"
    OPENAI_MODEL_TRANSCRIBE: str = "gpt-4o-mini-transcribe"
    OPENAI_MODEL_SEARCH: str = "gpt-4o-mini"

    OPENAI_TEMPERATURE_DETAILS: float = 0.7
    OPENAI_TEMPERATURE_VOICE: float = 0.2

    GENERATION_BATCH_SIZE: int = 4
    IMAGE_ASPECT_RATIO: str = "1:1"
    AI_CALL_TIMEOUT_SECONDS: float = 60.0
    PLACEHOLDER_IMAGE_URL: str = "https://images.unsplash.com/photo-1523381210434-271e8be1f52b?w=500&q=80"
    REFINEMENT_HISTORY_LIMIT: int = 10

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"


settings = Settings()
