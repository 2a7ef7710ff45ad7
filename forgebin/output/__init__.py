"""Console output and error presentation."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)
from .errors import (
    install_error_exit_code,
    plan_error_exit_code,
    print_install_error,
    print_plan_error,
)

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
    "install_error_exit_code",
    "plan_error_exit_code",
    "print_install_error",
    "print_plan_error",
]
