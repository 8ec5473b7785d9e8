"""
Gunicorn configuration for Metadata Probe production deployment
"""
import os

# Server socket
bind = f"{os.environ.get('HOST', '0.0.0.0')}:{os.environ.get('PORT', '8338')}"
backlog = 2048

# Worker processes
# Requests share no state, so any number of workers is safe
workers = int(os.environ.get('WEB_CONCURRENCY', '2'))
worker_class = 'sync'
timeout = 60  # Large files with big cover art take a while to read
keepalive = 5

# Restart workers after this many requests, with some variability
max_requests = 1000
max_requests_jitter = 100

# Logging
accesslog = '-'  # Log to stdout
errorlog = '-'   # Log to stderr
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'metadata-probe'

# Server mechanics
daemon = False
pidfile = None

# Server hooks
def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Server is ready. Listening at: %s", server.address)

def on_exit(server):
    """Called just before exiting."""
    server.log.info("Server is shutting down")
