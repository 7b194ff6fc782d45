from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./pantry.db"
    database_echo: bool = False

    # Logging
    log_level: str = "INFO"


settings = Settings()
