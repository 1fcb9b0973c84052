# structured logger handed to the rule as a collaborator
# wraps stdlib logging and adds a TRACE level below DEBUG

import logging
from typing import Optional

from surge_rule.config import settings

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def configure_logging(level: Optional[str] = None):
    """set up root logging once for the process (level defaults to settings.log_level)"""
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=TRACE if level_name == "TRACE" else getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class LoggerService:
    """
    logger collaborator: (message, context label, correlation id)
    
    every call is fire-and-forget - nothing is returned and nothing is raised,
    a broken handler is stdlib logging's problem, not the rule's
    """
    
    def __init__(self, name: str = "surge_rule"):
        self._logger = logging.getLogger(name)
    
    @staticmethod
    def _format(message: str, context: Optional[str], correlation_id: Optional[str]) -> str:
        parts = []
        if context:
            parts.append(f"[{context}]")
        parts.append(str(message))
        if correlation_id:
            parts.append(f"(id={correlation_id})")
        return " ".join(parts)
    
    def _emit(self, level: int, message: str, context: Optional[str], correlation_id: Optional[str]):
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(
            level,
            self._format(message, context, correlation_id),
            extra={"context": context, "correlation_id": correlation_id},
        )
    
    def trace(self, message: str, context: Optional[str] = None, correlation_id: Optional[str] = None):
        self._emit(TRACE, message, context, correlation_id)
    
    def debug(self, message: str, context: Optional[str] = None, correlation_id: Optional[str] = None):
        self._emit(logging.DEBUG, message, context, correlation_id)
    
    def log(self, message: str, context: Optional[str] = None, correlation_id: Optional[str] = None):
        self._emit(logging.INFO, message, context, correlation_id)
    
    def warn(self, message: str, context: Optional[str] = None, correlation_id: Optional[str] = None):
        self._emit(logging.WARNING, message, context, correlation_id)
    
    def error(self, message, context: Optional[str] = None, correlation_id: Optional[str] = None):
        """accepts an exception as well as a string"""
        self._emit(logging.ERROR, message, context, correlation_id)
