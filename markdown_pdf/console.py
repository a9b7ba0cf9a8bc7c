"""
Colored console logging shared by the conversion pipeline and the CLI.
"""

import threading
from typing import Optional

from colorama import init, Fore, Style

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ConsoleLogger:
    """Prints prefixed, colored log lines. Safe to share between concurrent conversions."""

    def __init__(self, debug: bool = False, prefix: Optional[str] = None):
        self.debug = debug
        self.prefix = prefix
        self._lock = threading.Lock()

    def child(self, prefix: str) -> "ConsoleLogger":
        """Return a logger that tags every line with ``prefix`` and shares this logger's lock."""
        logger = ConsoleLogger(self.debug, prefix)
        logger._lock = self._lock
        return logger

    def _emit(self, tag: str, message: str) -> None:
        if self.prefix:
            message = f"{self.prefix}: {message}"
        with self._lock:
            print(f"{tag}{Style.RESET_ALL} {message}")

    def log_debug(self, message: str) -> None:
        """Log debug message with color (only if debug mode is enabled)."""
        if self.debug:
            self._emit(f"{Fore.CYAN}[DEBUG]", message)

    def log_info(self, message: str) -> None:
        """Log info message with color."""
        self._emit(f"{Fore.GREEN}[INFO]", message)

    def log_warning(self, message: str) -> None:
        """Log warning message with color."""
        self._emit(f"{Fore.YELLOW}[WARNING]", message)

    def log_error(self, message: str) -> None:
        """Log error message with color."""
        self._emit(f"{Fore.RED}[ERROR]", message)

    def log_success(self, message: str) -> None:
        """Log success message with color."""
        self._emit(f"{Fore.GREEN}[OK]", message)


# Used when a caller does not pass its own logger
default_logger = ConsoleLogger()
