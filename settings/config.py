import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    """Configuration settings for the application."""
    PROJECT_NAME: str = "JWT Pizza Service"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "pizza")

    # JWT
    SECRET_KEY: str = os.getenv("SECRET_KEY", "MySecretKey@123")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Pizza factory (order fulfillment)
    FACTORY_URL: str = os.getenv("FACTORY_URL", "https://pizza-factory.cs329.click")
    FACTORY_API_KEY: str = os.getenv("FACTORY_API_KEY", "")
    FACTORY_TIMEOUT_SECONDS: float = 30.0

    # seed script
    DEFAULT_ADMIN_NAME: str = "Pizza Admin"
    DEFAULT_ADMIN_EMAIL: str = "a@jwt.com"
    DEFAULT_ADMIN_PASSWORD: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin")

    class Config:
        env_file = ".env"

settings = Settings()
