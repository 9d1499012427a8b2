import os
from datetime import timedelta

from dotenv import load_dotenv

# Load environment variables from a .env file if it exists
load_dotenv()


class Config:
    """
    Application configuration, read from environment variables.
    `create_app` copies these onto `app.config`; tests pass overrides.
    """

    APP_ENV = os.getenv('APP_ENV', 'development')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'change-me-in-production-please-32b')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_ACCESS_TOKEN_HOURS', '24')))
    JWT_TOKEN_LOCATION = ["headers"]
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    STORE_BACKEND = os.getenv('STORE_BACKEND', 'mysql')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def as_dict(cls):
        return {key: getattr(cls, key) for key in dir(cls) if key.isupper()}

    @classmethod
    def is_production(cls, config):
        return config.get('APP_ENV') == 'production'
