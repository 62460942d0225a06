import sys
from pathlib import Path

import pytest

# Ensure 'src' directory is on sys.path for tests
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / 'src'
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

SAMPLE = """\
top=1
; about the server
[Server]
Port = 8080

; the host
Host=localhost

[UserSettings]
Name=Joe User
; dangling comment
"""


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.ini"
    path.write_text(SAMPLE)
    return path


@pytest.fixture
def events() -> list:
    """Collects ``(severity, message)`` pairs from a DataFile reporter."""
    return []


@pytest.fixture
def reporter(events):
    def _report(severity, message):
        events.append((severity, message))

    return _report
