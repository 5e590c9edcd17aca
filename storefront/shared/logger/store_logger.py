import inspect
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

import structlog
from colorama import Fore, Style, init as colorama_init

colorama_init(autoreset=True)


class StoreLogger:
    """
    Structured logger used across the storefront client.

    Every call is written twice: a colored one-line rendering on the console
    and a JSON document in the log file. Instances are cached per name so
    components asking for the same logger share handlers.
    """

    _logger_cache: Dict[str, "StoreLogger"] = {}

    LEVEL_COLORS = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.MAGENTA + Style.BRIGHT,
    }

    def __init__(
        self,
        name: str = "storefront",
        log_file: Optional[str] = "storefront.log",
        level: str = "INFO",
        context: Optional[dict] = None,
    ):
        self.name = name
        self.context = context or {}

        if name in self._logger_cache:
            cached = self._logger_cache[name]
            self.console_logger = cached.console_logger
            self.file_logger = cached.file_logger
            if self.context:
                self.console_logger = self.console_logger.bind(**self.context)
                if self.file_logger is not None:
                    self.file_logger = self.file_logger.bind(**self.context)
            return

        log_level = getattr(logging, level.upper(), logging.INFO)

        # ----------------------------
        # Caller lookup
        # ----------------------------
        def add_caller(logger, method_name, event_dict):
            frame = inspect.currentframe()
            while frame:
                module_name = frame.f_globals.get("__name__", "")
                if module_name and not module_name.startswith("structlog") and not module_name.endswith("store_logger"):
                    event_dict["module"] = module_name
                    event_dict["function"] = frame.f_code.co_name
                    event_dict["lineno"] = frame.f_lineno
                    owner = frame.f_locals.get("self")
                    if owner is not None:
                        event_dict["class"] = owner.__class__.__name__
                    break
                frame = frame.f_back
            return event_dict

        # ----------------------------
        # Console rendering
        # ----------------------------
        def render_console(logger, method_name, event_dict):
            ts = event_dict.get("timestamp") or datetime.now(timezone.utc).isoformat()
            level_name = event_dict.get("level", method_name).upper()
            msg = event_dict.get("event", "")
            extra = event_dict.get("extra")

            line = f"{ts} [{name}] {level_name}: {msg}"
            if extra:
                line += f" {extra}"
            if level_name in ("WARNING", "ERROR", "CRITICAL"):
                line += f" ({event_dict.get('module', '')}.{event_dict.get('function', '')}:{event_dict.get('lineno', '')})"

            return f"{self.LEVEL_COLORS.get(level_name, '')}{line}{Style.RESET_ALL}"

        console_logger = logging.getLogger(f"{name}.console")
        console_logger.setLevel(log_level)
        console_logger.propagate = False
        if not console_logger.handlers:
            ch = logging.StreamHandler()
            ch.setFormatter(logging.Formatter("%(message)s"))
            console_logger.addHandler(ch)

        self.console_logger = structlog.wrap_logger(
            console_logger,
            processors=[
                structlog.processors.TimeStamper(fmt="ISO"),
                structlog.stdlib.add_log_level,
                add_caller,
                render_console,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        ).bind(logger=name, **self.context)

        # ----------------------------
        # File logger (JSON)
        # ----------------------------
        self.file_logger = None
        if log_file:
            file_logger = logging.getLogger(f"{name}.file")
            file_logger.setLevel(log_level)
            file_logger.propagate = False
            if not any(isinstance(h, logging.FileHandler) for h in file_logger.handlers):
                fh = logging.FileHandler(log_file, encoding="utf-8")
                fh.setFormatter(logging.Formatter("%(message)s"))
                file_logger.addHandler(fh)

            self.file_logger = structlog.wrap_logger(
                file_logger,
                processors=[
                    structlog.processors.TimeStamper(fmt="ISO"),
                    structlog.stdlib.add_log_level,
                    structlog.processors.StackInfoRenderer(),
                    structlog.processors.format_exc_info,
                    add_caller,
                    structlog.processors.UnicodeDecoder(),
                    structlog.processors.JSONRenderer(default=str),
                ],
                wrapper_class=structlog.stdlib.BoundLogger,
                cache_logger_on_first_use=True,
            ).bind(logger=name, **self.context)

        self._logger_cache[name] = self

    def _emit(self, level: str, msg: str, **extra):
        getattr(self.console_logger, level)(msg, **extra)
        if self.file_logger is not None:
            getattr(self.file_logger, level)(msg, **extra)

    def debug(self, msg: str, **extra):
        self._emit("debug", msg, **extra)

    def info(self, msg: str, **extra):
        self._emit("info", msg, **extra)

    def warning(self, msg: str, **extra):
        self._emit("warning", msg, **extra)

    def error(self, msg: str, **extra):
        self._emit("error", msg, **extra)

    def critical(self, msg: str, **extra):
        self._emit("critical", msg, **extra)

    def exception(self, msg: str, **extra):
        self._emit("exception", msg, **extra)

