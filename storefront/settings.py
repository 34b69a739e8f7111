"""
Django settings for storefront.
"""
import os
import platform
from decimal import Decimal

import dj_database_url
from celery.schedules import crontab
from redbeat import RedBeatScheduler

from storefront.envs import get_bool, get_decimal, get_int, get_string
from storefront.sentry import init_sentry

VERSION = "0.4.0"

ENVIRONMENT = get_string(
    name="STOREFRONT_ENVIRONMENT",
    default="dev",
    description="The execution environment that the app is in (e.g. dev, staging, prod)",
    required=True,
)

ENTITY_STORE_BASE_URL = get_string(
    name="ENTITY_STORE_BASE_URL",
    default=None,
    description="Base url of the remote entity store. If unset, affiliate data is kept in the local database only",
)

# initialize Sentry before doing anything else so we capture any config errors
SENTRY_DSN = get_string(
    name="SENTRY_DSN", default="", description="The connection settings for Sentry"
)
SENTRY_LOG_LEVEL = get_string(
    name="SENTRY_LOG_LEVEL", default="ERROR", description="The log level for Sentry"
)
init_sentry(
    dsn=SENTRY_DSN,
    environment=ENVIRONMENT,
    version=VERSION,
    log_level=SENTRY_LOG_LEVEL,
    storage_backend_url=ENTITY_STORE_BASE_URL,
)

# Build paths inside the project like this: os.path.join(BASE_DIR, ...)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = get_string(
    name="SECRET_KEY", default=None, description="Django secret key.", required=True
)

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = get_bool(
    name="DEBUG",
    default=False,
    dev_only=True,
    description="Set to True to enable DEBUG mode. Don't turn on in production.",
)

ALLOWED_HOSTS = ["*"]

# configure a custom user model
AUTH_USER_MODEL = "users.User"

# Application definition
INSTALLED_APPS = (
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django.contrib.humanize",
    "rest_framework",
    "django_filters",
    # Put our apps after this point
    "storefront",
    "users",
    "entitystore",
    "affiliate",
    "ecommerce",
)

MIDDLEWARE = (
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
)

SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"

ROOT_URLCONF = "storefront.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ]
        },
    }
]

WSGI_APPLICATION = "storefront.wsgi.application"


# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
DEFAULT_DATABASE_CONFIG = dj_database_url.parse(
    get_string(
        name="DATABASE_URL",
        default="sqlite:///{}".format(os.path.join(BASE_DIR, "db.sqlite3")),
        description="The connection url to the database",
        required=True,
    )
)
DEFAULT_DATABASE_CONFIG["CONN_MAX_AGE"] = get_int(
    name="STOREFRONT_DB_CONN_MAX_AGE",
    default=0,
    description="Maximum age of connection to the database in seconds",
)
DATABASES = {"default": DEFAULT_DATABASE_CONFIG}
DEFAULT_AUTO_FIELD = "django.db.models.AutoField"

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = os.path.join(BASE_DIR, "staticfiles")

# Logging configuration
LOG_LEVEL = get_string(
    name="STOREFRONT_LOG_LEVEL", default="INFO", description="The log level default"
)
DJANGO_LOG_LEVEL = get_string(
    name="DJANGO_LOG_LEVEL", default="INFO", description="The log level for django"
)

HOSTNAME = platform.node().split(".")[0]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {"require_debug_false": {"()": "django.utils.log.RequireDebugFalse"}},
    "formatters": {
        "verbose": {
            "format": (
                "[%(asctime)s] %(levelname)s %(process)d [%(name)s] "
                "%(filename)s:%(lineno)d - "
                "[{hostname}] - %(message)s"
            ).format(hostname=HOSTNAME),
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "mail_admins": {
            "level": "ERROR",
            "filters": ["require_debug_false"],
            "class": "django.utils.log.AdminEmailHandler",
        },
    },
    "loggers": {
        "django": {
            "propagate": True,
            "level": DJANGO_LOG_LEVEL,
            "handlers": ["console"],
        },
        "django.request": {
            "handlers": ["mail_admins"],
            "level": DJANGO_LOG_LEVEL,
            "propagate": True,
        },
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
}

# Redis
_redis_url = get_string(
    name="REDIS_URL", default=None, description="Redis URL for non-production use"
)

# django cache back-ends. Redis is shared between processes, so ledger change
# notifications received by one process invalidate cached values for all of them
if _redis_url:
    CACHES = {
        "default": {
            "BACKEND": "django_redis.cache.RedisCache",
            "LOCATION": _redis_url,
            "OPTIONS": {"CLIENT_CLASS": "django_redis.client.DefaultClient"},
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "local-in-memory-cache",
        }
    }
DASHBOARD_STATS_CACHE_TIMEOUT = get_int(
    name="DASHBOARD_STATS_CACHE_TIMEOUT",
    default=60 * 5,
    description="How long the affiliate dashboard totals are cached, unless a ledger change arrives first",
)

# Celery
CELERY_BROKER_URL = get_string(
    name="CELERY_BROKER_URL",
    default=_redis_url,
    description="Where celery should get tasks, default is Redis URL",
)
CELERY_RESULT_BACKEND = get_string(
    name="CELERY_RESULT_BACKEND",
    default=_redis_url,
    description="Where celery should put task results, default is Redis URL",
)
CELERY_BEAT_SCHEDULER = RedBeatScheduler
CELERY_REDBEAT_REDIS_URL = _redis_url
CELERY_TASK_ALWAYS_EAGER = get_bool(
    name="CELERY_TASK_ALWAYS_EAGER",
    default=False,
    dev_only=True,
    description="Enables eager execution of celery tasks, development only",
)
CELERY_TASK_EAGER_PROPAGATES = get_bool(
    name="CELERY_TASK_EAGER_PROPAGATES",
    default=True,
    description="Early executed tasks propagate exceptions",
)
CRON_BASKET_DELETE_HOURS = get_string(
    name="CRON_BASKET_DELETE_HOURS",
    default=0,
    description="'hours' value for the 'delete-expired-baskets' scheduled task (defaults to midnight)",
)
CRON_BASKET_DELETE_DAYS = get_string(
    name="CRON_BASKET_DELETE_DAYS",
    default="*",
    description="'days' value for the 'delete-expired-baskets' scheduled task (defaults to everyday)",
)
BASKET_EXPIRY_DAYS = get_int(
    name="BASKET_EXPIRY_DAYS",
    default=15,
    description="Expiry life span of a basket in days",
)

CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TIMEZONE = "UTC"
CELERY_TASK_TRACK_STARTED = True
CELERY_TASK_SEND_SENT_EVENT = True

CELERY_BEAT_SCHEDULE = {
    "delete-expired-baskets": {
        "task": "ecommerce.tasks.delete_expired_baskets",
        "schedule": crontab(
            minute=0,
            hour=CRON_BASKET_DELETE_HOURS,
            day_of_week=CRON_BASKET_DELETE_DAYS,
            day_of_month="*",
            month_of_year="*",
        ),
    },
}

# DRF configuration
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework.authentication.SessionAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.IsAuthenticated",),
    "EXCEPTION_HANDLER": "storefront.exceptions.exception_handler",
    "TEST_REQUEST_DEFAULT_FORMAT": "json",
}

# Remote entity store
ENTITY_STORE_API_KEY = get_string(
    name="ENTITY_STORE_API_KEY",
    default=None,
    description="The api key sent with every request to the remote entity store",
)
ENTITY_STORE_REQUEST_TIMEOUT = get_int(
    name="ENTITY_STORE_REQUEST_TIMEOUT",
    default=10,
    description="Timeout in seconds for requests to the remote entity store",
)
ENTITY_STORE_WEBHOOK_SECRET = get_string(
    name="ENTITY_STORE_WEBHOOK_SECRET",
    default=None,
    description="Shared secret used to verify change notifications sent by the remote entity store",
)
ENTITY_STORE_AFFILIATE_ENTITY = get_string(
    name="ENTITY_STORE_AFFILIATE_ENTITY",
    default="Affiliate",
    description="The remote entity name which holds affiliates",
)
ENTITY_STORE_TRANSACTION_ENTITY = get_string(
    name="ENTITY_STORE_TRANSACTION_ENTITY",
    default="AffiliateTransaction",
    description="The remote entity name which holds affiliate transactions",
)

# Affiliate program
AFFILIATE_COMMISSION_RATE = get_decimal(
    name="AFFILIATE_COMMISSION_RATE",
    default=Decimal("0.10"),
    description="Fraction of an order subtotal credited to the referring affiliate as commission",
)
AFFILIATE_POINTS_RATE = get_decimal(
    name="AFFILIATE_POINTS_RATE",
    default=Decimal("0.015"),
    description="Fraction of an order subtotal credited to the referring affiliate as points",
)
AFFILIATE_DEFAULT_DISCOUNT_PERCENT = get_int(
    name="AFFILIATE_DEFAULT_DISCOUNT_PERCENT",
    default=15,
    description="Discount percent given to customers using a new affiliate's code",
)

# Checkout
SHIPPING_COST = get_decimal(
    name="SHIPPING_COST",
    default=Decimal("15.00"),
    description="Flat shipping amount added to every order",
)
ORDER_NUMBER_PREFIX = get_string(
    name="ORDER_NUMBER_PREFIX",
    default="RDR",
    description="Prefix for order numbers, used to tell orders from different environments apart",
)
