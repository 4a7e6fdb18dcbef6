"""
Calculation Logger - audit trail for standardizations and aggregations.

Console output stays quiet (warnings and errors only). When a log directory
is configured, every calculation for a city is written to its own file.
"""

import logging
import os
import re
from datetime import datetime
from typing import Optional


class CalculationLogger:
    """
    Process-wide audit log of calculations, one file per city.

    Callers point it at a city with setup_for_city right before logging,
    without awaiting in between, so entries land in the file of the city
    they describe. Debug detail only reaches that file.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if CalculationLogger._initialized:
            return

        self.logger = logging.getLogger("cpi.calculations")
        self.logger.setLevel(logging.DEBUG)
        self.file_handler = None
        self.log_file_path = None

        self.console_handler = logging.StreamHandler()
        self.console_handler.setLevel(logging.WARNING)
        self.console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        self.logger.addHandler(self.console_handler)

        CalculationLogger._initialized = True

    def setup_for_city(self, log_dir: str, city: str, country: str) -> str:
        """
        Route subsequent calculation logs to a file for one city.

        Args:
            log_dir: Directory holding the calculation logs
            city: City identifier
            country: Country identifier

        Returns:
            Path of the log file
        """
        os.makedirs(log_dir, exist_ok=True)
        slug = re.sub(r"[^A-Za-z0-9_-]+", "_", f"{city}_{country}").strip("_") or "city"
        path = os.path.join(log_dir, f"cpi_{slug}.log")
        if self.file_handler and self.log_file_path == path:
            return path

        self.close_file()
        self.log_file_path = path

        self.file_handler = logging.FileHandler(self.log_file_path, encoding="utf-8")
        self.file_handler.setLevel(logging.DEBUG)
        self.file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        self.logger.addHandler(self.file_handler)

        self.info("=== Calculations for %s, %s (%s) ===", city, country, datetime.now().isoformat(timespec="seconds"))
        return self.log_file_path

    def close_file(self):
        """Detach and close the per-city file handler, if any."""
        if self.file_handler:
            self.logger.removeHandler(self.file_handler)
            self.file_handler.close()
            self.file_handler = None

    def debug(self, msg: str, *args):
        self.logger.debug(msg, *args)

    def info(self, msg: str, *args):
        self.logger.info(msg, *args)

    def calculation(self, key: str, raw: float, standardized: float, comment: str):
        """Log one standardized indicator"""
        self.debug("STANDARDIZED [%s] raw=%s standardized=%s comment=%s", key, raw, standardized, comment)

    def rejected(self, key: str, field: str, reason: str):
        """Log inputs that failed validation"""
        self.info("REJECTED [%s] %s: %s", key, field, reason)

    def aggregation(self, city: str, country: str, present: int, total: int, index: Optional[float]):
        """Log a composite recomputation"""
        if index is None:
            self.debug("AGGREGATED [%s, %s] 0/%d dimensions present, index = no data", city, country, total)
        else:
            self.debug("AGGREGATED [%s, %s] %d/%d dimensions present, index = %.2f", city, country, present, total, index)


_logger = None


def get_logger() -> CalculationLogger:
    """Get the global calculation logger instance"""
    global _logger
    if _logger is None:
        _logger = CalculationLogger()
    return _logger


def setup_logging(log_dir: str, city: str, country: str) -> CalculationLogger:
    """Convenience function to start a per-city calculation log"""
    logger = get_logger()
    logger.setup_for_city(log_dir, city, country)
    return logger
