import os
from pathlib import Path

import pytest


@pytest.fixture(scope="session", autouse=True)
def isolate_home_config(tmp_path_factory):
    """Point the home directory at an empty temporary directory.

    Some tests expect no user-level configuration or credentials file to
    exist, and none may pick up a real API key from the environment.
    """
    home = tmp_path_factory.mktemp("home")
    saved = {name: os.environ.get(name) for name in ("HOME", "USERPROFILE", "GEMINI_API_KEY")}
    os.environ["HOME"] = str(home)
    os.environ["USERPROFILE"] = str(home)
    os.environ.pop("GEMINI_API_KEY", None)
    assert Path.home() == home
    try:
        yield home
    finally:
        for name, value in saved.items():
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value
