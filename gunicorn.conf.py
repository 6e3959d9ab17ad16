"""
Gunicorn configuration for the BrandWallet API.
"""
import os

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"

# Card evaluation is short, synchronous DB work
workers = int(os.getenv('GUNICORN_WORKERS', '2'))
worker_class = 'sync'
timeout = 60
keepalive = 5

# Logging
accesslog = '-'  # stdout
errorlog = '-'   # stderr
loglevel = os.getenv('LOG_LEVEL', 'info')
capture_output = True

proc_name = 'brandwallet'

preload_app = True
graceful_timeout = 30


def on_starting(server):
    from brandwallet.utils.logging_config import setup_logging
    setup_logging()
    server.log.info("Starting BrandWallet server...")
