import os
from dotenv import load_dotenv
from sqlalchemy.engine import make_url

load_dotenv()

class Settings:
    # JWT Configuration
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-secret-key-here")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))

    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "todo_user")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "todo")
    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")

    # Takes precedence over the POSTGRES_* values when set
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    SQL_ECHO: bool = os.getenv("SQL_ECHO", "false").lower() == "true"

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Todo listings
    PAGE_SIZE: int = int(os.getenv("PAGE_SIZE", "10"))

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    def redacted_database_url(self) -> str:
        """Database URL with the password masked, for log and console output"""
        return make_url(self.database_url).render_as_string(hide_password=True)

    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite"""
        return self.database_url.startswith("sqlite")

settings = Settings()
