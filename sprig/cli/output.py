"""CLI output utilities and formatting."""

from colorama import Fore, Style

BANNER = f"""
{Fore.GREEN}  ,   ,{Style.RESET_ALL}
{Fore.GREEN}   \\ / {Style.RESET_ALL}  {Fore.CYAN}{Style.BRIGHT}sprig{Style.RESET_ALL}
{Fore.GREEN}    |  {Style.RESET_ALL}  {Fore.WHITE}A small branching version-control system{Style.RESET_ALL}
"""

_color = True


def set_color(enabled: bool) -> None:
    """Turn coloured output on or off for the rest of the process."""
    global _color
    _color = enabled


def color_enabled() -> bool:
    return _color


def _paint(color: str, text: str) -> str:
    if not _color:
        return text
    return f"{color}{text}{Style.RESET_ALL}"


def success(message: str) -> str:
    """Format success message in green."""
    return _paint(Fore.GREEN, f"✓ {message}")


def info(message: str) -> str:
    """Format info message in cyan."""
    return _paint(Fore.CYAN, f"→ {message}")


def warning(message: str) -> str:
    """Format warning message in yellow."""
    return _paint(Fore.YELLOW, f"⚠ {message}")


def error(message: str) -> str:
    """Format error message in red."""
    return _paint(Fore.RED, f"✗ {message}")


def heading(title: str) -> str:
    """Format a status section title."""
    return _paint(Style.BRIGHT, f"=== {title} ===")
