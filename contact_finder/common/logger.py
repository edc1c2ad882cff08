"""
Search-scoped logging for contact discovery.

Every line written while searching one company carries the session, the
company and, inside a phase, the phase label:

    [session:acme-robotic] [Acme Robotics] [leadership] Running search

Set DEBUG_MODE=true to see per-phase skip decisions.
"""

import logging
import os
import sys
from typing import Optional

from contact_finder.common.config import Config


DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"


class SearchLogger:
    """Logger wrapper that tags messages with the search they belong to."""

    def __init__(
        self,
        name: str,
        session_id: Optional[str] = None,
        company_name: Optional[str] = None,
        phase: Optional[str] = None,
    ):
        self.logger = logging.getLogger(name)
        self.session_id = session_id
        self.company_name = company_name
        self.phase = phase
        if DEBUG_MODE:
            self.logger.setLevel(logging.DEBUG)

    def for_phase(self, phase: str) -> "SearchLogger":
        """Logger for the same search, tagged with phase."""
        return SearchLogger(self.logger.name, self.session_id, self.company_name, phase)

    def _format_message(self, message: str) -> str:
        tags = []
        if self.session_id:
            tags.append(f"[session:{self.session_id[:12]}]")
        if self.company_name:
            tags.append(f"[{self.company_name}]")
        if self.phase:
            tags.append(f"[{self.phase}]")
        return " ".join(tags + [message])

    def debug(self, message: str, **kwargs):
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(self._format_message(message), **kwargs)


def get_logger(
    name: str,
    session_id: Optional[str] = None,
    company_name: Optional[str] = None,
) -> SearchLogger:
    return SearchLogger(name, session_id=session_id, company_name=company_name)


def setup_logging(level: Optional[str] = None, format: str = "simple") -> None:
    """
    Send log records to stdout.

    For applications embedding the library; the package itself never
    installs handlers.

    Args:
        level: DEBUG, INFO, WARNING or ERROR (default Config.LOG_LEVEL)
        format: "simple" for humans, "json" for log aggregators
    """
    log_level = getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO)

    if format == "json":
        formatter = logging.Formatter(
            '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
