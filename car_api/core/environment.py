import os

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./data/cardata.db"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def is_production() -> bool:
    """Detects if running in production via PRODUCTION variable"""
    return _env_flag("PRODUCTION")


def get_database_url() -> str:
    """Returns SQLAlchemy database URL based on environment"""
    dev_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if is_production():
        return os.getenv("DATABASE_URL_PROD", dev_url)
    return dev_url


def get_host() -> str:
    return os.getenv("CAR_API_HOST", "0.0.0.0")


def get_port() -> int:
    return int(os.getenv("CAR_API_PORT", "8000"))


def get_build_date_max_years() -> int:
    """Maximum vehicle age, in whole years, accepted on create"""
    return int(os.getenv("BUILD_DATE_MAX_YEARS", "4"))


def get_build_age_days_per_year() -> float:
    """Length of the approximate year used for the vehicle age check"""
    return float(os.getenv("BUILD_AGE_DAYS_PER_YEAR", "365"))


def is_atomic_batch_insert() -> bool:
    """When true a create batch is persisted in a single transaction"""
    return _env_flag("ATOMIC_BATCH_INSERT")


def is_metrics_enabled() -> bool:
    return _env_flag("ENABLE_METRICS")


def should_reset_db() -> bool:
    return _env_flag("RESET_DB_ON_START")


def should_clear_db() -> bool:
    # clear wins over reset
    return _env_flag("CLEAR_DB_ON_START")


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")
