from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    TELEGRAM_BOT_TOKEN: str | None = None
    TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"
    TELEGRAM_WEBHOOK_SECRET: str | None = None
    PUBLIC_BASE_URL: str | None = None

    FIRESTORE_PROJECT_ID: str | None = None
    FIRESTORE_BOOKINGS_COLLECTION: str = "bookings"
    FIRESTORE_LOCKS_COLLECTION: str = "slot_locks"

    BUSINESS_NAME: str = "Tennis Court Booking Bot"
    BUSINESS_TIMEZONE: str = "Europe/Berlin"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    OPENING_HOUR: int = 7
    CLOSING_HOUR: int = 22  # last slot starts at CLOSING_HOUR:30
    SLOTS_PER_PAGE: int = 9
    SLOTS_PER_ROW: int = 3
    BOOKING_DAYS_AHEAD: int = 7


settings = Settings()
