import multiprocessing

# Gunicorn Production Configuration
# Rendering rasterises whole pages, so requests are CPU-bound: one worker per core (+1).
workers = multiprocessing.cpu_count() + 1
threads = 2
worker_class = 'gthread'

# Resilience
timeout = 60
max_requests = 500
max_requests_jitter = 50
keepalive = 5

# Logging
accesslog = '-'       # Stdout
errorlog = '-'        # Stderr
loglevel = 'info'
capture_output = True
