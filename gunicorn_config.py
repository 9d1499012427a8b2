import os

# gunicorn -c gunicorn_config.py main:app

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"

# Each worker builds its own store; connections are opened per statement.
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
worker_class = "gthread"

# large transaction batches
timeout = int(os.getenv("GUNICORN_TIMEOUT", "120"))

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
