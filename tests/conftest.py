"""
Shared pytest fixtures for bracket generation tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip the exhaustive field-size sweeps
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from brackets.models import Participant
from brackets.seeding import make_participants


@pytest.fixture
def five_participants():
    """Five participants seeded 1..5, listed out of seed order."""
    return [
        Participant(id="p4", name="Delta", seed=4),
        Participant(id="p1", name="Alpha", seed=1),
        Participant(id="p5", name="Echo", seed=5),
        Participant(id="p2", name="Bravo", seed=2),
        Participant(id="p3", name="Charlie", seed=3),
    ]


@pytest.fixture
def eight_participants():
    return make_participants(8)


@pytest.fixture
def sixteen_participants():
    return make_participants(16)


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app at a temporary data directory and clear rate-limit state."""
    import app as app_module

    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(app_module, 'DATA_DIR', str(data_dir))
    monkeypatch.setattr(app_module, 'SETTINGS_FILE', str(data_dir / 'settings.yaml'))
    app_module.rate_limiter.reset()
    yield str(data_dir)
    app_module.rate_limiter.reset()


@pytest.fixture
def client(temp_data_dir):
    """Create a test client backed by a temporary data directory."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client
