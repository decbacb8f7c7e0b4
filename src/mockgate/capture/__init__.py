"""
MockGate Capture Module

Request logging for intercepted traffic.
"""

from .request_log import LogMode, RequestLogInfo, LoggingConfiguration

__all__ = [
    'LogMode',
    'RequestLogInfo',
    'LoggingConfiguration',
]
