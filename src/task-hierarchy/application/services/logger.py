import logging
import os
import typing

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname) - 8s %(name)s:%(lineno)d %(message)s"
DEFAULT_LOG_FILENAME = "logs/task-hierarchy.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_LIBRARIES_LIST = ["asyncio", "neuroglia", "opentelemetry"]
DEFAULT_LOG_LIBRARIES_LEVEL = "WARN"


def configure_logging(
    log_level: str = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    console: bool = True,
    file: bool = False,
    filename: str = DEFAULT_LOG_FILENAME,
    lib_list: typing.List = DEFAULT_LOG_LIBRARIES_LIST,
    lib_level: str = DEFAULT_LOG_LIBRARIES_LEVEL,
) -> None:
    """Set up the root logger for the task hierarchy engine.

    Previous root handlers are replaced, so calling this twice is safe.
    Libraries in lib_list get lib_level, so a DEBUG root level only shows
    the engine's own debug records.

    Args:
        log_level (str): Root logger level
        log_format (str): Record format shared by every handler
        console (bool): Attach a stream handler
        file (bool): Attach a file handler writing to filename (its directory is created)
        filename (str): Log file path
        lib_list (typing.List): Logger names of noisy libraries
        lib_level (str): Level applied to the lib_list loggers
    """
    log_level = log_level.upper()
    lib_level = lib_level.upper()

    # Clear existing handlers to prevent duplicates when called twice
    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.handlers.clear()

    root_logger.setLevel(log_level)
    formatter = logging.Formatter(log_format)

    if console:
        root_logger.addHandler(_configure_handler(logging.StreamHandler(), log_level, formatter))
    if file:
        _configure_file_based_logging(root_logger, log_level, formatter, filename)

    for lib_name in lib_list:
        logging.getLogger(lib_name).setLevel(lib_level)


def configure_logging_from_settings(settings: typing.Any) -> None:
    """Configure logging from an application Settings instance."""
    configure_logging(
        log_level=settings.log_level,
        file=settings.log_file_enabled,
        filename=settings.log_filename,
    )


def _configure_file_based_logging(
    root_logger: logging.Logger,
    log_level: str,
    formatter: logging.Formatter,
    filename: str,
) -> None:
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    file_handler = logging.FileHandler(filename)
    root_logger.addHandler(_configure_handler(file_handler, log_level, formatter))


def _configure_handler(
    handler: logging.Handler,
    log_level: str,
    formatter: logging.Formatter,
) -> logging.Handler:
    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    return handler
