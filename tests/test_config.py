import pytest

from ovpn_mgmt.config import ManagementConfig, load_config
from ovpn_mgmt.management.exceptions import ConfigurationError


def write(tmp_path, text):
    path = tmp_path / "ovpn_mgmt.conf"
    path.write_text(text)
    return str(path)


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(str(tmp_path / "absent.conf")) == ManagementConfig()


def test_values(tmp_path):
    path = write(tmp_path, "[management]\nhost = 10.0.0.1\nport = 7505\ntimeout = 2.5\npassword = s3cret\n")

    assert load_config(path) == ManagementConfig(host="10.0.0.1", port=7505, timeout=2.5, password="s3cret")


def test_empty_password_means_no_login(tmp_path):
    path = write(tmp_path, "[management]\npassword =\n")

    assert load_config(path).password is None


def test_env_override(tmp_path, monkeypatch):
    path = write(tmp_path, "[management]\nport = 7000\n")
    monkeypatch.setenv("OVPN_MGMT_CONFIG", path)

    assert load_config().port == 7000


@pytest.mark.parametrize("body", ["port = http", "port = 0", "timeout = -1", "timeout = soon"])
def test_invalid_values(tmp_path, body):
    path = write(tmp_path, f"[management]\n{body}\n")

    with pytest.raises(ConfigurationError):
        load_config(path)
