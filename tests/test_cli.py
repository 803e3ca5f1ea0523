import hashlib
import json

from click.testing import CliRunner
import yaml

from glimage.cli import cli
from glimage.image.config import ImageConfiguration

from helper import data_file


def invoke(*args):
    runner = CliRunner()
    return runner.invoke(cli, list(args), catch_exceptions=False)


def test_config_inspect():
    result = invoke("config", "inspect", data_file("config.json"))
    assert result.exit_code == 0
    with open(data_file("config.json")) as f:
        assert json.loads(result.output) == json.load(f)


def test_config_inspect_yaml():
    result = invoke("config", "inspect", "--format", "yaml", data_file("config_oci_only.json"))
    assert result.exit_code == 0
    assert yaml.safe_load(result.output)["architecture"] == "amd64"


def test_config_inspect_invalid_extension(write_json):
    path = write_json({"architecture": "amd64", "os": "linux", "config": {"Memory": "x"}})

    result = invoke("config", "inspect", path)
    assert result.exit_code == 1
    assert "extension schema invalid at $.config.Memory" in result.output

    result = invoke("config", "inspect", "--lenient", path)
    assert result.exit_code == 0
    assert '"architecture": "amd64"' in result.output


def test_config_validate_ok():
    result = invoke("config", "validate", data_file("config.json"))
    assert result.exit_code == 0
    assert result.output.splitlines() == ["base: ok", "extension: ok"]


def test_config_validate_reports_layers(write_json):
    path = write_json({"config": {"Memory": 2048, "Healthcheck": {"Test": ["CMD-SHELL", "x"], "Interval": 30000000000}}})

    result = invoke("config", "validate", path)

    assert result.exit_code == 1
    lines = result.output.splitlines()
    assert lines[0].startswith("base: invalid:")
    assert lines[1] == "extension: ok"


def test_config_validate_malformed(write_json, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{")
    result = invoke("config", "validate", str(path))
    assert result.exit_code == 1
    assert "malformed payload" in result.output


def test_config_digest():
    result = invoke("config", "digest", data_file("config.json"))
    assert result.exit_code == 0
    assert result.output.strip() == ImageConfiguration.from_file(data_file("config.json")).digest()


def test_config_normalize(tmp_path):
    output = tmp_path / "normalized.json"

    result = invoke("config", "normalize", data_file("config.json"), str(output))
    assert result.exit_code == 0
    assert ImageConfiguration.from_file(str(output)) == ImageConfiguration.from_file(data_file("config.json"))

    result = invoke("config", "normalize", data_file("config.json"), str(output))
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_manifest_inspect():
    result = invoke("manifest", "inspect", "--tag", "postgres:15.4", data_file("manifest.json"))
    assert result.exit_code == 0
    assert json.loads(result.output)["RepoTags"] == ["postgres:15.4"]

    result = invoke("manifest", "inspect", "--tag", "postgres:16", data_file("manifest.json"))
    assert result.exit_code == 1


def test_repositories():
    result = invoke("repositories", "inspect", data_file("repositories.json"))
    assert result.exit_code == 0
    assert list(json.loads(result.output)) == ["postgres"]

    result = invoke("repositories", "layer", data_file("repositories.json"), "postgres", "15.4")
    assert result.exit_code == 0
    assert result.output.strip() == "c039956656e1c9cd1e2d72dba02179b8d9008e0c0771af344944e218c7dc3351"


def test_settings_file(tmp_path, monkeypatch):
    settings = tmp_path / "custom.ini"
    settings.write_text("[DEFAULT]\nindent = 2\nformat = json\n")
    monkeypatch.setenv("GLIMAGE_CONFIG", str(settings))

    result = invoke("repositories", "inspect", data_file("repositories.json"))

    assert result.exit_code == 0
    assert result.output.startswith('{\n  "postgres"')


def test_config_digest_raw_and_verify():
    path = data_file("config.json")
    with open(path, "rb") as f:
        expected = f"sha256:{hashlib.sha256(f.read()).hexdigest()}"

    result = invoke("config", "digest", "--raw", path)
    assert result.output.strip() == expected

    result = invoke("config", "digest", "--verify", expected, path)
    assert result.exit_code == 0

    result = invoke("config", "digest", "--verify", "sha256:00", path)
    assert result.exit_code == 1
    assert "Invalid checksum" in result.output


def test_log_records_go_to_stderr(write_json):
    path = write_json({"architecture": "amd64", "os": "linux", "config": {"Memory": "x"}})

    result = invoke("--log-level", "warning", "config", "inspect", "--lenient", path)

    assert result.exit_code == 0
    assert "retrying without docker extension" in result.stderr
    assert json.loads(result.stdout) == {"architecture": "amd64", "os": "linux", "config": {}}
