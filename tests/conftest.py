import io
import sys
from pathlib import Path

import pytest

# Ensure the repository root is importable when running tests straight from a checkout.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bingo.render import make_console  # noqa: E402


@pytest.fixture
def console_buffer():
    """A rich console that writes plain text into a StringIO."""

    buffer = io.StringIO()
    console = make_console(file=buffer, force_terminal=False, color_system=None, width=120)
    return console, buffer
