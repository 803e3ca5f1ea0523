import json

import pytest

from helper import data_file


@pytest.fixture
def config_payload():
    with open(data_file("config.json"), "rb") as f:
        return f.read()


@pytest.fixture
def write_json(tmp_path):
    def _write(tree, name="payload.json"):
        path = tmp_path / name
        path.write_text(json.dumps(tree))
        return str(path)

    return _write


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("GLIMAGE_CONFIG", str(tmp_path / "glimage.ini"))
