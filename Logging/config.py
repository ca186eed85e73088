"""
Configuration for logging outputs.
"""

from dataclasses import dataclass


@dataclass
class LoggingConfig:
    log_filename: str = "orbit_log.txt"
    write_log: bool = True
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
