import logging, sys

# Third-party loggers that log every request at DEBUG/INFO
NOISY = ("urllib3", "httpx", "httpcore")

def setup_logging(level: str = "INFO", stream=None):
    """Send log lines to `stream` (stdout unless stdout carries data, e.g. --dry-run)."""
    root = logging.getLogger()
    if root.handlers:  # already configured (second main() call, or pytest)
        return
    lvl = logging.getLevelName(level.upper())
    root.setLevel(lvl if isinstance(lvl, int) else logging.INFO)
    h = logging.StreamHandler(stream if stream is not None else sys.stdout)
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s :: %(message)s"))
    root.addHandler(h)
    for name in NOISY:
        logging.getLogger(name).setLevel(logging.WARNING)
