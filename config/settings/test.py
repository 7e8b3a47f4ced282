# config/settings/test.py
from .base import *  # noqa

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

MC_LOG_LEVEL = "WARNING"
LOGGING["loggers"]["mc_core"]["level"] = MC_LOG_LEVEL  # noqa: F405
# Let pytest's caplog see application logs
LOGGING["loggers"]["mc_core"]["propagate"] = True  # noqa: F405
