import os

# Basic config
host = os.getenv("HOST", "0.0.0.0")
port = os.getenv("PORT", "5010")
bind = f"{host}:{port}"

# One worker: the sync scheduler and in-memory recommendation cache live in-process
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
keepalive = 120
timeout = int(os.getenv("TIMEOUT", "120"))

# Logging
loglevel = os.getenv("LOG_LEVEL", "info")
errorlog = "-"  # stderr
accesslog = "-"  # stdout
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(D)sus'

def post_fork(server, worker):
    """Called just after a worker has been forked."""
    os.environ["WORKER_ID"] = str(worker.age)
    server.log.info(f"Worker {worker.age} forked (pid {worker.pid})")
