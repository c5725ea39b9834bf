import pytest
from click.testing import CliRunner

from ecsign.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def key_dir(tmp_path, monkeypatch):
    path = tmp_path / "keys"
    monkeypatch.setenv("ECSIGN_KEY_DIR", str(path))
    for var in ("ECSIGN_DEFAULT_CURVE", "ECSIGN_DEFAULT_DIGEST", "ECSIGN_PRIVATE_KEY_MODE"):
        monkeypatch.delenv(var, raising=False)
    return path


@pytest.fixture
def message(tmp_path):
    path = tmp_path / "message.txt"
    path.write_bytes(b"hello")
    return path


def sign_text(runner, *args):
    result = runner.invoke(cli, ["sign", *args])
    assert result.exit_code == 0, result.output
    return result.output.strip()


class TestCLI:
    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "ecsign - EC key generation, signing and verification" in result.output

    def test_curves(self, runner):
        result = runner.invoke(cli, ["curves"])
        assert result.exit_code == 0
        assert "secp256k1" in result.output
        assert "brainpool256r1" in result.output
        assert "sha1" in result.output

    def test_keygen_default_paths(self, runner, key_dir):
        result = runner.invoke(cli, ["keygen"])
        assert result.exit_code == 0, result.output
        assert "Generated secp256k1 key pair" in result.output
        assert (key_dir / "ec_public.pem").exists()
        assert (key_dir / "ec_private.pem").exists()

    def test_keygen_unsupported_curve(self, runner, key_dir):
        result = runner.invoke(cli, ["keygen", "--curve", "nist-p256"])
        assert result.exit_code == 2
        assert "UNSUPPORTED_CURVE" in result.output

    def test_sign_and_verify(self, runner, key_dir, message):
        assert runner.invoke(cli, ["keygen", "-c", "brainpool256r1"]).exit_code == 0

        text = sign_text(runner, str(message))
        assert text.endswith(":")

        result = runner.invoke(cli, ["verify", "--signature", text, str(message)])
        assert result.exit_code == 0, result.output
        assert "valid" in result.output

    def test_verify_tampered_message(self, runner, key_dir, message, tmp_path):
        runner.invoke(cli, ["keygen"])
        text = sign_text(runner, "--digest", "sha1", str(message))

        other = tmp_path / "other.txt"
        other.write_bytes(b"hellO")

        result = runner.invoke(cli, ["verify", "-d", "sha1", "-s", text, str(other)])
        assert result.exit_code == 1
        assert "invalid" in result.output

    def test_explicit_key_paths(self, runner, tmp_path, message):
        pub, priv = tmp_path / "a.pub", tmp_path / "a.key"
        result = runner.invoke(cli, ["keygen", "--public", str(pub), "--private", str(priv)])
        assert result.exit_code == 0, result.output

        text = sign_text(runner, "--key", str(priv), str(message))

        result = runner.invoke(cli, ["verify", "--key", str(pub), "--signature", text, str(message)])
        assert result.exit_code == 0

    def test_sign_stdin(self, runner, key_dir):
        runner.invoke(cli, ["keygen"])

        result = runner.invoke(cli, ["sign", "-"], input=b"hello")
        assert result.exit_code == 0, result.output
        assert result.output.strip().endswith(":")

    def test_sign_missing_key(self, runner, key_dir, message):
        result = runner.invoke(cli, ["sign", str(message)])
        assert result.exit_code == 2
        assert "IO_ERROR" in result.output

    def test_sign_unsupported_digest(self, runner, key_dir, message):
        runner.invoke(cli, ["keygen"])

        result = runner.invoke(cli, ["sign", "--digest", "md5", str(message)])
        assert result.exit_code == 2
        assert "UNSUPPORTED_DIGEST" in result.output

    def test_verify_malformed_signature_text(self, runner, key_dir, message):
        runner.invoke(cli, ["keygen"])

        result = runner.invoke(cli, ["verify", "-s", "48:999:", str(message)])
        assert result.exit_code == 2
        assert "PARSE_ERROR" in result.output

    def test_config_file(self, runner, tmp_path, key_dir, message):
        config = tmp_path / "ecsign.yaml"
        config.write_text(f"default_curve: brainpool256r1\nkey_dir: {tmp_path / 'cfg'}\n")
        # Environment still wins for key_dir
        result = runner.invoke(cli, ["--config", str(config), "keygen"])
        assert result.exit_code == 0, result.output
        assert "Generated brainpool256r1 key pair" in result.output
        assert (key_dir / "ec_private.pem").exists()
