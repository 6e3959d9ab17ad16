"""
Configuration management for the BrandWallet service.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


DEV_SECRET_KEY = 'dev-secret-key-change-in-production'


class BaseConfig:
    """Base configuration."""
    SECRET_KEY = os.getenv('SECRET_KEY', DEV_SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Frontend origins allowed by CORS
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv('CORS_ORIGINS', 'http://localhost:5173').split(',')
        if origin.strip()
    ]

    # Wallet card defaults
    DEFAULT_CARD_TIER = 'member'

    # Card unlock notifications
    CARD_UNLOCK_NOTIFICATIONS_ENABLED = _env_flag('CARD_UNLOCK_NOTIFICATIONS', True)
    CARD_UNLOCK_ACTION_URL = '/wallet'


class DevelopmentConfig(BaseConfig):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        'sqlite:///brandwallet_dev.db'  # SQLite fallback for local dev
    )


class ProductionConfig(BaseConfig):
    """Production configuration."""
    DEBUG = False

    _db_url = os.getenv('DATABASE_URL', '')
    if _db_url.startswith('postgres://'):
        # SQLAlchemy requires postgresql:// not postgres://
        _db_url = _db_url.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_DATABASE_URI = _db_url

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 5,
        'pool_recycle': 300,
        'pool_pre_ping': True,  # Verify connections before using
    }

    _secret_key = os.getenv('SECRET_KEY', '')

    @classmethod
    def validate_secret_key(cls) -> str:
        """
        Reject a missing, development or short SECRET_KEY in production.

        Raises:
            RuntimeError: If the key is unusable
        """
        if not cls._secret_key:
            raise RuntimeError('SECRET_KEY environment variable is not set')
        if cls._secret_key == DEV_SECRET_KEY:
            raise RuntimeError('SECRET_KEY is the development default')
        if len(cls._secret_key) < 32:
            raise RuntimeError('SECRET_KEY is too short (minimum 32 characters)')
        return cls._secret_key

    SECRET_KEY = _secret_key  # Validated at app startup


class TestingConfig(BaseConfig):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    CARD_UNLOCK_NOTIFICATIONS_ENABLED = True


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig
}


def get_config(config_name: str = 'development'):
    """Get configuration class by name."""
    return config_map.get(config_name, DevelopmentConfig)


def validate_config(config_name: str = 'development') -> None:
    """
    Validate configuration before app startup.

    Args:
        config_name: The configuration environment name

    Raises:
        RuntimeError: If validation fails in production
    """
    if config_name == 'production':
        ProductionConfig.validate_secret_key()
