from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Sunny Auto Backend"
    API_V1_STR: str = "/api"

    # Server
    PORT: int = 8000
    ENVIRONMENT: str = "development"

    # Security
    ADMIN_SECRET: str = "dev_admin_secret"

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    STORAGE_BUCKET: str = "avatars"

    # Tables
    APPOINTMENTS_TABLE: str = "appointments"
    PROFILES_TABLE: str = "profiles"
    ADMIN_PROFILES_TABLE: str = "admin_profiles"
    SERVICES_TABLE: str = "services"
    NOTIFICATIONS_TABLE: str = "notifications"

    # Pricing
    TAX_RATE: float = 0.08
    DEFAULT_PRICE: float = 99.99

    # Navigation
    HOME_ROUTE: str = "/UserHome"

    # Notifications
    SMTP_SERVER: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
