import logging

from pythonjsonlogger import jsonlogger

from app.config import settings

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(module)s %(funcName)s %(lineno)d %(message)s"


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once; an existing handler installed here is replaced
    so that repeated app construction in tests does not duplicate output.
    """
    log_level = (level or settings.log_level).upper()
    use_json = settings.log_json if json_output is None else json_output

    handler = logging.StreamHandler()
    handler.set_name("app")
    if use_json:
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                fmt=_JSON_FORMAT,
                rename_fields={"levelname": "level", "name": "logger_name", "asctime": "timestamp"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        if existing.get_name() == "app":
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
    logging.getLogger(__name__).debug("Logging configured at level %s", log_level)
