"""
Logging configuration

Plain stdlib logging to stdout, with a filter that masks sensitive values
passed to log calls as dict arguments.
"""
import logging
import sys

from innsync.utils.security import mask_sensitive_data


class SensitiveDataFilter(logging.Filter):
    """Mask passwords, tokens and identity numbers in dict log arguments"""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, dict):
            record.args = mask_sensitive_data(record.args)
        elif isinstance(record.args, tuple) and record.args:
            record.args = tuple(
                mask_sensitive_data(arg) if isinstance(arg, (dict, list)) else arg
                for arg in record.args
            )
        return True


def setup_logging(log_level: str = "INFO", service_name: str = "innsync") -> None:
    """
    Configure the root logger

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        service_name: Name shown in every log line
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(SensitiveDataFilter())
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=f"%(asctime)s - {service_name} - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
    )
