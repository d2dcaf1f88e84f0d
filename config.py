import os
from dotenv import load_dotenv

# Load .env variables from the project root when present
load_dotenv()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL", "").strip()
    if url:
        return url
    user = os.getenv("DB_USER", "postgres")
    password = os.getenv("DB_PASSWORD", "")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "telemedicine_db")
    return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}"


class Config:
    """Base configuration shared across environments; used as is when APP_ENV is unset."""
    ENV = "default"
    DATABASE_URL = _database_url()
    SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
    PORT = int(os.getenv("PORT", "3000"))
    CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:3000")

    SESSION_SECRET = os.getenv("SESSION_SECRET", "your_session_secret")
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session_cookie_name")
    SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", "86400"))  # 24 hours
    SESSION_COOKIE_SECURE = False

    LOG_DIR = os.getenv("LOG_DIR", "")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @property
    def is_development(self) -> bool:
        return self.ENV == "development"


class DevConfig(Config):
    """Local development configuration"""
    ENV = "development"


class ProdConfig(Config):
    """Production configuration"""
    ENV = "production"
    SESSION_COOKIE_SECURE = True


class TestConfig(Config):
    ENV = "test"


def get_config() -> Config:
    env = os.getenv("APP_ENV", "").lower()
    if env == "production":
        return ProdConfig()
    if env == "test":
        return TestConfig()
    if env == "development":
        return DevConfig()
    # error details stay hidden unless development is asked for explicitly
    return Config()


settings = get_config()
