import logging
import os
import sys
from typing import Optional


def init_logger(level: str = 'INFO', log_file: Optional[str] = None):
    logger = logging.getLogger()  # root logger
    logger.setLevel(level)

    # avoid duplicate output when called twice
    if logger.hasHandlers():
        return

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8', mode='a+')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # stdout carries the results, so logs go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
