import logging

from studyhub.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging():
    settings = get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Avoid stacking handlers when the app module is reloaded
    if not any(getattr(h, "_studyhub", False) for h in root_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._studyhub = True
        root_logger.addHandler(handler)

    for logger_name in ["uvicorn", "uvicorn.error", "fastapi", "studyhub"]:
        logging.getLogger(logger_name).setLevel(level)
