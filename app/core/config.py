from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./portal_clases.db"
    # "require" para Postgres gestionado; vacío en local / SQLite
    DB_SSLMODE: str | None = None

    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Permite el acceso de administración con el DNI especial "ADMIN"
    ADMIN_LOGIN_ENABLED: bool = True

    # "fixed": techo literal de 10 plazas al reservar recuperaciones.
    # "catalog": usa la capacidad_maxima de la franja del catálogo.
    RECOVERY_CAPACITY_SOURCE: str = "fixed"

    LOG_LEVEL: str = "INFO"

    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
