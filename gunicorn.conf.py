"""
Gunicorn configuration for the portfolio viewer.

Viewer sessions are held in process memory, so the worker count defaults
to one; concurrency comes from threads. All values can be overridden via
environment variables.
"""

import logging
import os

# =============================================================================
# WORKER CONFIGURATION
# =============================================================================

# gthread: one process, several request threads sharing the session store
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")

# More than one worker splits sessions across processes
workers = int(os.environ.get("GUNICORN_WORKERS", "1"))

# Threads per worker; each portfolio lookup blocks its thread
threads = int(os.environ.get("GUNICORN_THREADS", "8"))


# =============================================================================
# TIMEOUTS & KEEPALIVE
# =============================================================================

# Must exceed PORTFOLIO_API_TIMEOUT
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))

graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "10"))

keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))


# =============================================================================
# RESOURCE LIMITS
# =============================================================================

# Worker restarts would drop every viewer session
max_requests = int(os.environ.get("GUNICORN_MAX_REQUESTS", "0"))

limit_request_line = int(os.environ.get("GUNICORN_LIMIT_REQUEST_LINE", "4094"))
limit_request_fields = int(os.environ.get("GUNICORN_LIMIT_REQUEST_FIELDS", "100"))


# =============================================================================
# NETWORK CONFIGURATION
# =============================================================================

bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8080")

# Forward proxy headers (when behind nginx/reverse proxy)
forwarded_allow_ips = os.environ.get("GUNICORN_FORWARDED_ALLOW_IPS", "*")


# =============================================================================
# LOGGING
# =============================================================================

loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")

access_log_format = os.environ.get(
    "GUNICORN_ACCESS_LOG_FORMAT",
    '%(h)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'
)

accesslog = os.environ.get("GUNICORN_ACCESS_LOG", "-")
errorlog = os.environ.get("GUNICORN_ERROR_LOG", "-")

capture_output = os.environ.get("GUNICORN_CAPTURE_OUTPUT", "true").lower() == "true"


# =============================================================================
# HOOKS
# =============================================================================

def on_starting(server):
    """Called just before master process starts."""
    if workers > 1:
        logging.getLogger("gunicorn").warning(
            f"{workers} workers configured; viewer sessions are per process and "
            "a visitor may land on a worker that does not know their session"
        )
    logging.getLogger("gunicorn").info(
        f"Starting gunicorn with {workers} worker(s), worker_class={worker_class}, threads={threads}"
    )


def worker_abort(worker):
    """Called when worker receives SIGABRT (timeout)."""
    logging.getLogger("gunicorn").error(f"Worker {worker.pid} aborted (timeout?)")
