"""
Custom logging module for ledger events
"""
from clinica.logging.custom_logger import CustomLogger, get_logger
from clinica.logging.log_levels import LogLevel

__all__ = [
    'CustomLogger',
    'LogLevel',
    'get_logger',
]
