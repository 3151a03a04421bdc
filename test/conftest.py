import pytest

from fakes import FakeRunner, write_svg


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def workspace(tmp_path):
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def icon_dir(tmp_path):
    """Input folder with the three icons used by the end-to-end examples."""
    path = tmp_path / "icons"
    for name in ("Home Icon.svg", "search.svg", "2fast.svg"):
        write_svg(path / name)
    return path
