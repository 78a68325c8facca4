"""Django settings for the energy exchange ledger.


This project runs the token ledger, the mint/burn approval workflow and the
sealed-bid energy auction against a host platform:
- Identity, ordering and world state are supplied by the host (host_stub here)
- Each API call is one atomic invocation against the host state


Privileged organizations are configuration, not code (see LEDGER_* below).
"""

import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-insecure-key")
DEBUG = os.getenv("DEBUG", "1") in ("1", "true", "True", "yes")
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "*").split(",")
CSRF_TRUSTED_ORIGINS = os.getenv("CSRF_TRUSTED_ORIGINS", "").split(",") if os.getenv("CSRF_TRUSTED_ORIGINS") else []

#######################
# Ledger policy: which organization approves orders and which one may burn
LEDGER_APPROVER_MSPID = os.getenv("LEDGER_APPROVER_MSPID", "Org1MSP")
LEDGER_MINTER_MSPID = os.getenv("LEDGER_MINTER_MSPID", "Org1MSP")

# Organization of the peer executing the contract (sealed-bid visibility)
HOST_PEER_MSPID = os.getenv("HOST_PEER_MSPID", "Org1MSP")

# Gateway headers carrying the caller identity
IDENTITY_ID_HEADER = os.getenv("IDENTITY_ID_HEADER", "X-Client-Id")
IDENTITY_MSPID_HEADER = os.getenv("IDENTITY_MSPID_HEADER", "X-Client-Mspid")
#######################


INSTALLED_APPS = [
	"django.contrib.contenttypes",
	# local apps
	"core",
	"api",
	"host_stub",
]


MIDDLEWARE = [
	"django.middleware.security.SecurityMiddleware",
	"django.middleware.common.CommonMiddleware",
]


ROOT_URLCONF = "energy_exchange.urls"


DB_ENGINE = os.getenv("DB_ENGINE", "sqlite")
if DB_ENGINE == "postgres":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("POSTGRES_DB", "energy_exchange"),
            "USER": os.getenv("POSTGRES_USER", "energy_exchange"),
            "PASSWORD": os.getenv("POSTGRES_PASSWORD", "energy_exchange"),
            "HOST": os.getenv("POSTGRES_HOST", "localhost"),
            "PORT": os.getenv("POSTGRES_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOGGING = {
	"version": 1,
	"disable_existing_loggers": False,
	"formatters": {
		"plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
	},
	"handlers": {
		"console": {"class": "logging.StreamHandler", "formatter": "plain"},
	},
	"loggers": {
		"core": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
		"api": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
	},
}


LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True


DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
