import copy
import sys
from pathlib import Path

import pytest

# Add repo root to path so keeper_paths imports resolve without an install
_repo_root = Path(__file__).parent
_repo_root_str = str(_repo_root)
if _repo_root_str not in sys.path:
    sys.path.insert(0, _repo_root_str)

import keeper_paths.core.config as keeper_config  # noqa: E402

pytest_plugins = ["keeper_paths.testing.fakes"]


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: needs a live fork or RPC")


@pytest.fixture
def restore_global_config():
    original = copy.deepcopy(keeper_config.CONFIG)
    yield
    keeper_config.set_config(original)
