"""Conftest.py (root-level).

We keep this in root pytest fixtures in pytest's doctest plugin to be available, as well
as avoiding conftest.py from being included in the wheel.

Every test (and doctest) runs with ``HOME``, ``XDG_CONFIG_HOME`` and the working
directory pointed at a temporary directory, so nothing touches the real
``~/.gitconfig``.
"""
import pathlib
import shutil
import typing as t

import pytest


@pytest.fixture(autouse=True)
def add_doctest_fixtures(
    request: pytest.FixtureRequest,
    doctest_namespace: dict[str, t.Any],
    tmp_path: pathlib.Path,
) -> None:
    """Harness pytest fixtures to doctests namespace."""
    from _pytest.doctest import DoctestItem

    if isinstance(request._pyfuncitem, DoctestItem):
        doctest_namespace["tmp_path"] = tmp_path


@pytest.fixture(autouse=True)
def setup(
    request: pytest.FixtureRequest,
    set_home: pathlib.Path,
    xdg_config_path: pathlib.Path,
) -> None:
    """Automatically load the pytest fixtures in the parameters."""
    pass


@pytest.fixture
def user_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Return temporary directory standing in for the user's home."""
    p = tmp_path / "home"
    p.mkdir(exist_ok=True)
    return p


@pytest.fixture
def set_home(
    monkeypatch: pytest.MonkeyPatch,
    user_path: pathlib.Path,
) -> pathlib.Path:
    """Point ``HOME`` at :func:`user_path` and clear gitlinker overrides."""
    monkeypatch.setenv("HOME", str(user_path))
    monkeypatch.delenv("GITLINKER_CONFIGDIR", raising=False)
    monkeypatch.delenv("GITLINKER_GITCONFIG", raising=False)
    return user_path


@pytest.fixture(autouse=True)
def cwd_default(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
    """Change the current directory to a temporary directory."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def xdg_config_path(
    user_path: pathlib.Path,
    set_home: pathlib.Path,
) -> pathlib.Path:
    """Create and return path to use for XDG Config Path."""
    p = user_path / ".config"
    if not p.exists():
        p.mkdir()
    return p


@pytest.fixture(scope="function")
def config_path(
    xdg_config_path: pathlib.Path,
    request: pytest.FixtureRequest,
) -> pathlib.Path:
    """Ensure and return gitlinker configuration path."""
    conf_path = xdg_config_path / "gitlinker"
    conf_path.mkdir(exist_ok=True)

    def clean() -> None:
        shutil.rmtree(conf_path)

    request.addfinalizer(clean)
    return conf_path


@pytest.fixture(autouse=True)
def set_xdg_config_path(
    monkeypatch: pytest.MonkeyPatch,
    xdg_config_path: pathlib.Path,
) -> None:
    """Set XDG_CONFIG_HOME environment variable."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg_config_path))


@pytest.fixture
def gitconfig(user_path: pathlib.Path) -> pathlib.Path:
    """Return the path of the (not yet created) ``~/.gitconfig``."""
    return user_path / ".gitconfig"


@pytest.fixture
def profiles_path(user_path: pathlib.Path) -> pathlib.Path:
    """Return ``~/.config/git/profiles``, created."""
    p = user_path / ".config" / "git" / "profiles"
    p.mkdir(parents=True, exist_ok=True)
    return p
