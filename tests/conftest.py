import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'kubelevate' and tests/ as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_kubelevate_caches


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point settings at an empty per-test dir and drop developer overrides."""
    for key in list(os.environ):
        if key.startswith("KUBELEVATE_"):
            monkeypatch.delenv(key, raising=False)
    settings_dir = tmp_path / "kubelevate-settings"
    monkeypatch.setenv("KUBELEVATE_CONFIG_DIR", str(settings_dir))

    reset_kubelevate_caches()
    yield settings_dir
    reset_kubelevate_caches()


@pytest.fixture
def settings_dir(_isolated_settings: Path) -> Path:
    """User settings directory for the current test (created on demand)."""
    _isolated_settings.mkdir(parents=True, exist_ok=True)
    return _isolated_settings


@pytest.fixture
def kubeconfig_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A sample kubeconfig on disk, exported through KUBECONFIG."""
    from helpers.kubeconfigs import sample_kubeconfig_dict, write_kubeconfig

    path = write_kubeconfig(tmp_path / "kube" / "config", sample_kubeconfig_dict())
    monkeypatch.setenv("KUBECONFIG", str(path))
    return path
