import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./tenancy.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
    PLATFORM_TENANT_NAME = data.get("PLATFORM_TENANT_NAME", "Platform")
    PLATFORM_ADMIN_EMAIL = data.get("PLATFORM_ADMIN_EMAIL", "admin@platform.local")
    BOOTSTRAP_PLATFORM = bool(data.get("BOOTSTRAP_PLATFORM", True))
    MAX_TRANSIENT_RETRIES = int(data.get("MAX_TRANSIENT_RETRIES", 3))
    PURGE_INTERVAL_SECONDS = int(data.get("PURGE_INTERVAL_SECONDS", 3600))
    PURGE_BATCH_SIZE = int(data.get("PURGE_BATCH_SIZE", 200))
    DEFAULT_PAGE_LIMIT = int(data.get("DEFAULT_PAGE_LIMIT", 10))
    MAX_PAGE_LIMIT = int(data.get("MAX_PAGE_LIMIT", 100))
