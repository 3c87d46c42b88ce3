# Run with: gunicorn -c gunicorn.conf.py "agenticwit:create_app()"
import os

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "1"))
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr; the app itself logs JSON to stdout
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust proxy headers; ProxyFix in the app decides how many hops
forwarded_allow_ips = "*"
proxy_protocol = False


def worker_exit(server, worker):
    # Close the database pool and Redis client owned by this worker's app
    app = getattr(worker, "wsgi", None)
    if app is not None and hasattr(app, "extensions"):
        from agenticwit import dispose_store

        dispose_store(app)
