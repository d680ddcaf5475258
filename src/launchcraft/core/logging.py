"""Structured logging for LaunchCraft."""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "launchcraft"


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _install_handlers(
    level: LogLevel,
    json_output: bool,
    log_file: Optional[Path],
) -> logging.Logger:
    """(Re)install handlers on the package root logger."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, level.value))
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = _build_formatter(json_output)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


class StructuredLogger:
    """
    Logger that attaches structured context to each record.

    Context keys become attributes on the LogRecord, so the JSON formatter
    emits them as top-level fields.
    """

    def __init__(self, name: str = ROOT_LOGGER_NAME):
        self.name = name
        self.logger = logging.getLogger(name)

    def _log_with_context(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        if context:
            kwargs.update(context)

        if kwargs:
            record = self.logger.makeRecord(
                self.logger.name, level, "", 0, message, (), None
            )
            for key, value in kwargs.items():
                setattr(record, key, value)
            self.logger.handle(record)
        else:
            self.logger.log(level, message)

    def debug(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log debug message."""
        self._log_with_context(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log info message."""
        self._log_with_context(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log warning message."""
        self._log_with_context(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log error message."""
        self._log_with_context(logging.ERROR, message, context, **kwargs)

    def log_llm_call(
        self,
        provider: str,
        model: str,
        prompt: str,
        response: str,
        tokens_input: Optional[int] = None,
        tokens_output: Optional[int] = None,
        latency_ms: Optional[float] = None,
        cost: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log an LLM API call with structured metadata.

        Args:
            provider: Provider name (e.g., "openai", "openrouter")
            model: Model name
            prompt: Input prompt (truncated in logs)
            response: Response text (truncated in logs)
            tokens_input: Prompt tokens reported by the provider
            tokens_output: Completion tokens reported by the provider
            latency_ms: Request latency in milliseconds
            cost: Estimated cost in dollars
            **kwargs: Additional metadata
        """
        prompt_preview = prompt[:200] + "..." if len(prompt) > 200 else prompt
        response_preview = response[:200] + "..." if len(response) > 200 else response

        context = {
            "event_type": "llm_call",
            "provider": provider,
            "model": model,
            "prompt_length": len(prompt),
            "response_length": len(response),
            "prompt_preview": prompt_preview,
            "response_preview": response_preview,
        }

        if tokens_input is not None:
            context["tokens_input"] = tokens_input
        if tokens_output is not None:
            context["tokens_output"] = tokens_output
        if latency_ms is not None:
            context["latency_ms"] = latency_ms
        if cost is not None:
            context["cost"] = cost

        context.update(kwargs)

        self.info(f"LLM call: {provider}/{model}", context=context)

    def log_pipeline_stage(
        self,
        stage: str,
        status: str,
        duration_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log a generation pipeline stage.

        Args:
            stage: Stage name (e.g., "compose", "provider_call", "parse")
            status: "started", "completed" or "failed"
            duration_ms: Stage duration in milliseconds
            **kwargs: Additional metadata
        """
        context = {
            "event_type": "pipeline_stage",
            "stage": stage,
            "status": status,
        }

        if duration_ms is not None:
            context["duration_ms"] = duration_ms

        context.update(kwargs)

        if status == "failed":
            self.error(f"Pipeline stage {stage} failed", context=context)
        elif status == "completed":
            self.info(f"Pipeline stage {stage} completed", context=context)
        else:
            self.debug(f"Pipeline stage {stage} started", context=context)

    def log_token_usage(
        self,
        provider: str,
        model: str,
        tokens_input: int,
        tokens_output: int,
        cost: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """Log token usage and estimated cost."""
        context = {
            "event_type": "token_usage",
            "provider": provider,
            "model": model,
            "tokens_input": tokens_input,
            "tokens_output": tokens_output,
            "tokens_total": tokens_input + tokens_output,
        }

        if cost is not None:
            context["cost"] = cost

        context.update(kwargs)

        self.info(f"Token usage: {tokens_input + tokens_output} tokens", context=context)


_loggers: dict[str, StructuredLogger] = {}
_configured = False


def get_logger(name: str = ROOT_LOGGER_NAME) -> StructuredLogger:
    """
    Get a structured logger under the `launchcraft` hierarchy.

    The package root logger gets default console handlers the first time any
    logger is requested; call configure_logging() to change them.
    """
    global _configured

    if not _configured:
        _install_handlers(LogLevel.INFO, json_output=False, log_file=None)
        _configured = True

    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> StructuredLogger:
    """
    Configure package-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON-formatted logs
        log_file: Optional file path to also write logs to

    Returns:
        The package root StructuredLogger
    """
    global _configured

    _install_handlers(
        LogLevel[level.upper()],
        json_output=json_output,
        log_file=Path(log_file) if log_file else None,
    )
    _configured = True
    return get_logger()
