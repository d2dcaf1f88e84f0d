import logging
import json
import os
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler

from config import settings


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logger(log_dir: str = settings.LOG_DIR, level: str = settings.LOG_LEVEL):
    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid stacking handlers when the app is created more than once (tests, reload)
    if getattr(logger, "_telemedicine_configured", False):
        return logger

    console = logging.StreamHandler()
    console.setFormatter(JsonFormatter())
    logger.addHandler(console)

    # — Log file rotates daily, keeps 14 days —
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handler = TimedRotatingFileHandler(
            filename=os.path.join(log_dir, "telemedicine_api.log"),
            when="midnight",
            backupCount=14,
            encoding="utf-8"
        )
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)

    logger._telemedicine_configured = True
    return logger
