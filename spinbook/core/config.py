from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    GOOGLE_CLIENT_EMAIL: str | None = None
    GOOGLE_PRIVATE_KEY: str | None = None
    GOOGLE_CALENDAR_ID: str | None = None
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    CALENDAR_TIMEOUT_SECONDS: float = 10.0

    STUDIO_NAME: str = "SpinBook Studio"
    STUDIO_ADDRESS: str | None = None
    STUDIO_EMAIL: str | None = None
    STUDIO_PHONE: str | None = None
    STUDIO_TIMEZONE: str = "America/Santiago"

    # All-day events block [start, end) of the day.
    ALL_DAY_BUSY_START_HOUR: int = 0
    ALL_DAY_BUSY_END_HOUR: int = 24

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    @property
    def is_dev(self) -> bool:
        return self.ENV.lower() in {"dev", "local", "development"}

    @property
    def has_google_credentials(self) -> bool:
        return bool(self.GOOGLE_CLIENT_EMAIL and self.GOOGLE_PRIVATE_KEY)


settings = Settings()
