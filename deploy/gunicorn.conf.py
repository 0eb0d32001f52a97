"""
Gunicorn Configuration

Production settings for the Hatch judging API.

Elimination and scoring serialize through an in-process lock registry, so
the app runs in a single worker. Scale with one service per hackathon set,
not with more workers.
"""
import os

# Server socket
bind = os.environ.get("BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
timeout = 60
keepalive = 5

# Logging
accesslog = os.environ.get("GUNICORN_ACCESS_LOG", "-")
errorlog = os.environ.get("GUNICORN_ERROR_LOG", "-")
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "hatchjudge"

# Server mechanics
daemon = False
pidfile = "/tmp/hatchjudge.pid"

# Security
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190

wsgi_app = "hatchjudge.main:app"


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Hatch judging API ready (single worker)")
