"""Probewatch Logging Module

This module provides centralized logging configuration for the Probewatch
service. It always logs to the console and can additionally write to a
rotating log file.
"""

from .logger_setup import LoggerConfigError, LoggingConfig, configure_logging, get_logger

__all__ = ["LoggerConfigError", "LoggingConfig", "configure_logging", "get_logger"]
