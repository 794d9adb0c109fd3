from pydantic_settings import BaseSettings, SettingsConfigDict
import os

class Settings(BaseSettings):
    APP_NAME: str = os.getenv("APP_NAME", "Brain Games Leaderboard")
    APP_URL: str = os.getenv("APP_URL", "http://localhost:8000")
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./leaderboard.db"
    )
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-secret-key")
    DEBUG: bool = os.getenv("DEBUG", "True") == "True"

    # Session cookie
    SESSION_COOKIE_NAME: str = "user_id"
    COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "False") == "True"
    COOKIE_MAX_AGE: int = 60 * 60 * 24 * 7  # 1 week

    # Password reset
    PASSWORD_RESET_TTL_MINUTES: int = 60
    EXPOSE_RESET_LINK: bool = os.getenv("EXPOSE_RESET_LINK", "False") == "True"

    # Rank needed for the TOP_10 achievement
    TOP_RANK_THRESHOLD: int = 10

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
