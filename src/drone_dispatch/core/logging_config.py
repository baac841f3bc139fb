"""Console logging for the CLI and the API server."""
import logging

from rich.logging import RichHandler

LOG_LEVEL_ENV_VAR = "DRONE_DISPATCH_LOG_LEVEL"

# Third-party loggers that drown out dispatch decisions at DEBUG.
_QUIET_LOGGERS = ("httpx", "urllib3", "shapely")


def configure(level: str = "INFO") -> None:
    """Route ``drone_dispatch`` log records through a rich console handler."""
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_time=False, show_path=False)],
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLogger().level))
