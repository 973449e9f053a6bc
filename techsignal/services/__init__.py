"""Services."""

from techsignal.services.log_walker import get_recent_logs_chunked
from techsignal.services.technical_analysis import TechnicalAnalyzer

__all__ = [
    "get_recent_logs_chunked",
    "TechnicalAnalyzer",
]
