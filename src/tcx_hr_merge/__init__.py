"""TCX heart-rate merger - enrich an activity with a second device's heart rate.

This package automatically loads environment variables from a .env file
when any module from this package is imported.
"""

__version__ = "0.1.0"

from pathlib import Path

from dotenv import load_dotenv

# Load .env file - project root first, then the current directory
_pkg_root = Path(__file__).parent
for _candidate in [
    _pkg_root.parent.parent / ".env",  # source checkout root
    Path.cwd() / ".env",  # current directory
]:
    if _candidate.exists():
        load_dotenv(_candidate)
        break
else:
    load_dotenv()  # fallback: search default locations
