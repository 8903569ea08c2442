import logging

logger = logging.getLogger("status_dashboard")

PREFIXES = {
    "info": "ℹ️", "ok": "✅", "warn": "⚠️",
    "error": "❌", "alert": "🚨", "success": "🔒", "monitor": "🕵️"
}

LEVELS = {
    "info": logging.INFO, "ok": logging.INFO, "success": logging.INFO,
    "monitor": logging.INFO, "warn": logging.WARNING,
    "error": logging.ERROR, "alert": logging.ERROR
}


def configure_logging(log_file=None, level=logging.INFO):
    if log_file:
        logging.basicConfig(filename=log_file, level=level,
                            format="%(asctime)s %(levelname)s %(message)s")
    else:
        logging.basicConfig(level=level,
                            format="%(asctime)s %(levelname)s %(message)s")


def log_event(level, msg, buffer=None):
    prefix = PREFIXES.get(level, "🔔")
    line = f"{prefix} {msg}"
    if buffer is not None:
        buffer.append(line)
    logger.log(LEVELS.get(level, logging.INFO), f"{level}: {msg}")
    return line
