"""
Structured console logger for the bouncing engine.

One line per record, details as a tree below it:

    [14:23:45.120] SCHEDULER ✓ Bounce started
                   ├─ marker: Marker('pin-1')
                   └─ cycles: 3

Timestamps carry milliseconds: animation steps are tens of ms apart.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from models.enums import LogLevel, LogCategory


# === ANSI COLORS ===
class Colors:
    """ANSI escape codes used by the console output"""
    RESET = '\033[0m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'


CATEGORY_COLORS = {
    LogCategory.CONFIG: Colors.CYAN,
    LogCategory.GEOMETRY: Colors.BLUE,
    LogCategory.TIMELINE: Colors.BRIGHT_BLUE,
    LogCategory.MOTION: Colors.BRIGHT_MAGENTA,
    LogCategory.SCHEDULER: Colors.BRIGHT_YELLOW,
    LogCategory.REGISTRY: Colors.BRIGHT_GREEN,
    LogCategory.SURFACE: Colors.BRIGHT_CYAN,
    LogCategory.TIMER: Colors.MAGENTA,
    LogCategory.SYSTEM: Colors.BRIGHT_WHITE,
    LogCategory.SHUTDOWN: Colors.YELLOW,
}

# level → (symbol, color)
LEVEL_STYLES: Dict[LogLevel, Tuple[str, str]] = {
    LogLevel.DEBUG: ('·', Colors.DIM),
    LogLevel.INFO: ('✓', Colors.GREEN),
    LogLevel.WARN: ('⚠', Colors.YELLOW),
    LogLevel.ERROR: ('✗', Colors.RED),
}

_LEVEL_ORDER = list(LogLevel)

LogSink = Callable[..., None]


@dataclass(frozen=True)
class LogRecord:
    """One emitted log entry"""
    created: datetime
    level: LogLevel
    category: LogCategory
    message: str
    details: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def flat_message(self) -> str:
        """Message with details folded in, for single-line receivers"""
        if not self.details:
            return self.message
        return f"{self.message} ({', '.join(self.details)})"


# === CORE LOGGER ===
class Logger:
    """
    Category-aware console logger

    Args:
        min_level: Records below this level are dropped
        use_colors: ANSI colours (disable when output is captured or piped)
    """

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
        self.min_level = min_level
        self.use_colors = use_colors
        self._sink: Optional[LogSink] = None

    def set_sink(self, sink: Optional[LogSink]) -> None:
        """
        Forward every emitted record to ``sink`` as well.

        Called with keyword arguments timestamp (ISO string), level and
        category (enum names) and message (details folded in).
        None removes the sink.
        """
        self._sink = sink

    def enabled_for(self, level: LogLevel) -> bool:
        return _LEVEL_ORDER.index(level) >= _LEVEL_ORDER.index(self.min_level)

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[List[str]] = None,
        **kwargs: Any
    ):
        """
        Emit one record.

        Args:
            category: Subsystem the record belongs to
            message: Headline text
            level: Severity
            details: Preformatted detail lines
            **kwargs: Extra details rendered as "key: value"
        """
        if not self.enabled_for(level):
            return

        lines = list(details or [])
        lines.extend(f"{key}: {value}" for key, value in kwargs.items())
        record = LogRecord(datetime.now(), level, category, message, tuple(lines))

        print(self._render(record))

        if self._sink is not None:
            self._sink(
                timestamp=record.created.isoformat(),
                level=record.level.name,
                category=record.category.name,
                message=record.flat_message,
            )

    # === Rendering ===
    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{Colors.RESET}" if self.use_colors else text

    def _render(self, record: LogRecord) -> str:
        stamp = record.created.strftime('[%H:%M:%S.') + f"{record.created.microsecond // 1000:03d}]"
        symbol, color = LEVEL_STYLES[record.level]
        head = " ".join((
            stamp,
            self._paint(record.category.name.ljust(9), CATEGORY_COLORS.get(record.category, Colors.WHITE)),
            self._paint(symbol, color),
            self._paint(record.message, color),
        ))

        out = [head]
        indent = " " * (len(stamp) + 1)
        last = len(record.details) - 1
        for i, detail in enumerate(record.details):
            branch = "└─" if i == last else "├─"
            out.append(f"{indent}{self._paint(branch, Colors.DIM)} {detail}")
        return "\n".join(out)

    # === Level helpers ===
    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        """Logger bound to ``category``; modules keep one at import time."""
        return BoundLogger(self, category)


class BoundLogger:
    """Logger with a fixed default category"""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    @property
    def category(self) -> LogCategory:
        return self._category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category)


# === Process-wide instance ===
_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """
    Reconfigure the shared logger in place.

    Bound loggers created at import time point at the same instance, so
    the change reaches every module.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
