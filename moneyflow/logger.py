import logging

LOGGER_NAME = "moneyflow"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler to the package logger (once)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Streamlit reruns the script on every interaction
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(handler)
    return logger
