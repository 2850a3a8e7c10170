"""
Logging setup for the arbitrage calculator.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper, add_log_level

from arbcalc.models.schemas import ArbitrageResult, NearArbSuggestion


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog for the application.

    Logs go to stderr so that stdout stays free for command output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            TimeStamper(fmt="iso"),
            JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Module-level loggers re-resolve the factory, so a new stderr is picked up
        cache_logger_on_first_use=False,
    )


class EvaluationLogger:
    """
    Appends evaluated results to a daily JSONL file for later analysis.
    """

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = structlog.get_logger("evaluation_logger")

        self._current_date: Optional[str] = None
        self._current_file: Optional[Path] = None
        self._file_handle = None

    def _today(self) -> str:
        return datetime.now().strftime("%Y-%m-%d")

    def _get_log_file(self) -> Path:
        """Get current day's log file, rotating if needed."""
        today = self._today()

        if today != self._current_date:
            if self._file_handle:
                self._file_handle.close()

            self._current_date = today
            self._current_file = self.log_dir / f"evaluations_{today}.jsonl"
            self._file_handle = open(self._current_file, "a")

        return self._current_file

    def log_result(self, result: ArbitrageResult, label: str = "") -> None:
        """
        Write one evaluation result.

        Args:
            result: The result to write
            label: Optional free-text tag stored next to the result
        """
        self._get_log_file()

        entry = {
            "type": "result",
            "label": label,
            "result": result.model_dump(mode="json"),
        }
        self._file_handle.write(json.dumps(entry) + "\n")
        self._file_handle.flush()

        self.logger.info(
            "result_logged",
            kind=result.kind.value,
            arbitrage=result.arbitrage,
        )

    def log_suggestion(self, suggestion: NearArbSuggestion) -> None:
        """Write one near-arbitrage suggestion."""
        self._get_log_file()

        entry = {
            "type": "suggestion",
            "suggestion": suggestion.model_dump(mode="json"),
        }
        self._file_handle.write(json.dumps(entry) + "\n")
        self._file_handle.flush()

        self.logger.debug("suggestion_logged", label=suggestion.label, margin=str(suggestion.margin))

    def close(self) -> None:
        """Close log file handle."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None
        self._current_date = None
