import logging

logger = logging.getLogger("pr_kb_lambda")
logger.setLevel(logging.INFO)
if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )
    logger.addHandler(_handler)
# Package records are emitted once, by the handler above
logger.propagate = False


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance with the given name.
    
    Module loggers under the package (``pr_kb_lambda.*``) carry no handler
    of their own and propagate to the package logger above.
    
    Args:
        name: Logger name (usually __name__)
    
    Returns:
        Logger instance
    """
    return logging.getLogger(name or logger.name)
