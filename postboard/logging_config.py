import logging
import sys

_HANDLER_ATTR = "_postboard"


def setup_logging(level: str = "INFO") -> None:
    """Attach a single stdout handler to the root logger.

    Calling it again (uvicorn reload, tests) does not add a second handler.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for h in root.handlers:
        if getattr(h, _HANDLER_ATTR, False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    setattr(handler, _HANDLER_ATTR, True)
    root.addHandler(handler)
