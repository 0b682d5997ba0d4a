import logging
import logging.handlers
import os
from datetime import datetime


def release_logger(logger):
    """
    Releases the logger
    :param logger: the logger to be released
    """
    handlers = logger.handlers[:]
    for handler in handlers:
        handler.close()
        logger.removeHandler(handler)


def initialize_logger(logger_name, config_file) -> logging.Logger:
    """
    Creates a logger configured by the `logging` section of a config dict

    :param logger_name: name of the logger, e.g. 'mission_planner'
    :param config_file: config dict with optional keys `level`, `log_to_console`, `log_to_file`,
        `log_file_dir`, `log_file_name`, `add_timestamp_to_log_file`
    """
    config = config_file.get('logging', {}) if config_file else {}

    # create logger
    logger = logging.getLogger(logger_name)
    release_logger(logger)
    logger.setLevel(config.get('level', 'INFO'))

    # create formatter
    formatter = logging.Formatter('%(asctime)s\t%(name)s\t%(levelname)s\t%(message)s')

    # create console handler
    if config.get('log_to_console', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # create and handle log file
    if config.get('log_to_file', False):
        log_file_dir = config.get('log_file_dir', 'logs')
        date_time_string = ''
        if config.get('add_timestamp_to_log_file', False):
            now = datetime.now()  # current date and time
            date_time_string = now.strftime("_%Y_%m_%d_%H-%M-%S")

        # if directory not exists create it
        os.makedirs(log_file_dir, exist_ok=True)

        log_file_path = os.path.join(log_file_dir, config.get('log_file_name', 'mission_planner') + date_time_string + ".log")
        file_handler = logging.handlers.RotatingFileHandler(log_file_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Config file loaded and logger created.")
    return logger
