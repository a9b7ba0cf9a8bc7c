"""
Checks that the runtime dependencies, including the Playwright Chromium build, are available.
"""

import importlib
import subprocess
import sys
from pathlib import Path
from typing import List, Tuple

from colorama import Fore, Style

# (import name, description)
REQUIRED_MODULES: List[Tuple[str, str]] = [
    ("markdown_it", "markdown-it-py"),
    ("mdit_py_plugins", "mdit-py-plugins"),
    ("linkify_it", "linkify-it-py"),
    ("emoji", "emoji"),
    ("pygments", "Pygments"),
    ("bs4", "beautifulsoup4"),
    ("jinja2", "Jinja2"),
    ("playwright", "Playwright"),
    ("tqdm", "tqdm"),
]


def check_module(name: str, description: str) -> bool:
    """Check if a Python module can be imported."""
    try:
        importlib.import_module(name)
    except ImportError:
        print(f"{Fore.RED}✗{Style.RESET_ALL} {description} is not installed")
        return False
    return True


def check_chromium() -> bool:
    """Check that Playwright has downloaded its Chromium build."""
    from playwright.sync_api import sync_playwright

    try:
        with sync_playwright() as playwright:
            executable = Path(playwright.chromium.executable_path)
    except Exception as e:
        print(f"{Fore.RED}✗{Style.RESET_ALL} Could not start Playwright: {e}")
        return False

    if not executable.exists():
        print(f"{Fore.RED}✗{Style.RESET_ALL} Playwright Chromium is not installed "
              f"(run: markdown-pdf --install-browsers)")
        return False
    return True


def check_dependencies(check_browser: bool = True) -> bool:
    """Return True when every required dependency is available.

    ``check_browser`` also verifies that the Chromium binary is installed,
    which requires starting the Playwright driver.
    """
    ok = all([check_module(name, description) for name, description in REQUIRED_MODULES])
    if ok and check_browser:
        ok = check_chromium()
    return ok


def install_browsers() -> bool:
    """Download the Chromium build used for rendering."""
    print("Installing Playwright Chromium...")
    try:
        subprocess.run([sys.executable, "-m", "playwright", "install", "chromium"],
                       check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        print(f"{Fore.RED}✗{Style.RESET_ALL} Failed to install Playwright Chromium: {e.stderr}")
        return False
    print(f"{Fore.GREEN}✓{Style.RESET_ALL} Playwright Chromium installed successfully")
    return True
