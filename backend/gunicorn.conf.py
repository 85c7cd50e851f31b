# gunicorn.conf.py — Production server configuration.
#
# Run from backend/ with:
#   gunicorn api.main:app -c gunicorn.conf.py

from core.config import get_settings
from db.database import ensure_schema

_settings = get_settings()

# Worker process count — each worker opens its own connection pool
workers = 4
worker_class = "uvicorn.workers.UvicornWorker"

# Bind — PORT from the environment / .env, default 5000
bind = f"0.0.0.0:{_settings.port}"

# Logging — write to stdout/stderr so the process manager (systemd, Docker, etc.)
# captures everything; structured JSON is handled by core/logging.py
accesslog = "-"
errorlog  = "-"
loglevel  = _settings.log_level.lower()

# Timeouts
timeout          = 60    # seconds before a worker is killed and restarted
keepalive        = 5     # seconds to wait for the next request on a keep-alive connection
graceful_timeout = 30    # seconds to finish in-flight requests on SIGTERM


def on_starting(server):
    """Create the tables in the master before any worker boots.

    Workers still run init_db in their lifespan, but by then the tables
    exist and create_all issues no CREATE statements.
    """
    ensure_schema(_settings.database_url)
