import os
import pytest
from framework_config import FrameworkConfiguration

FIXTURES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")
CONFIG_DIR = os.path.join(FIXTURES_DIR, "config")
APPS_DIR = os.path.join(FIXTURES_DIR, "apps")


@pytest.fixture(autouse=True)
def clean_app_env(monkeypatch):
    """Tests never inherit APP_ENV from the shell running them."""
    monkeypatch.delenv("APP_ENV", raising=False)


@pytest.fixture
def make_config(tmp_path):
    """Build a FrameworkConfiguration isolated from argv, entry points and the real project."""
    def _make(**kwargs):
        kwargs.setdefault("config_dirs", [])
        kwargs.setdefault("custom_dirs", [CONFIG_DIR])
        kwargs.setdefault("package_dirs", [])
        kwargs.setdefault("project_root", str(tmp_path))
        kwargs.setdefault("argv", [])
        return FrameworkConfiguration(**kwargs)
    return _make
