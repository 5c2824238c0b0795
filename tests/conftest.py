import pytest


@pytest.fixture
def exe(tmp_path) -> str:
    """An existing file standing in for a target executable."""
    path = tmp_path / "app.exe"
    path.write_text("")
    return str(path)


@pytest.fixture
def write_ini(tmp_path):
    """Write INI text to a file and return its path."""

    def _write(text: str, name: str = "launch.ini") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write
