"""
Gunicorn configuration for the JobTrack API.

Run with: gunicorn -c gunicorn.conf.py jobtrack.main:app
"""
import os

wsgi_app = "jobtrack.main:app"

# Server socket
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 1024

# Every worker runs its own APScheduler; the notification dispatch job is
# safe to run concurrently, the nightly rollup should run on a single worker.
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "uvicorn.workers.UvicornWorker"

# Worker lifecycle
max_requests = 1000
max_requests_jitter = 100

# Timeouts (resume uploads can be up to 10MB)
timeout = 60
keepalive = 5
graceful_timeout = 30

proc_name = "jobtrack_api"

daemon = False
pidfile = None

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)sus "%(a)s"'


def on_starting(server):
    server.log.info("Starting JobTrack API")


def when_ready(server):
    server.log.info(f"JobTrack API ready with {workers} workers on {bind}")


def worker_abort(worker):
    worker.log.info("Worker received SIGABRT signal")
