import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from webauthn_options import Configuration  # noqa: E402


@pytest.fixture
def challenge():
    return bytes(range(16))


@pytest.fixture
def config():
    return Configuration(domain="example.com", name="Example Corp", timeout_millis=60000)
