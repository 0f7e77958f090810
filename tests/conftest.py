import os

# Must be set before the application context loads config.yaml
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_CREATE_TABLES", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from tests.fixtures import *  # noqa: E402,F401,F403
