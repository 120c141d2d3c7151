"""Tests for the sealchain command-line interface."""

import logging

import pytest
from click.testing import CliRunner

from cli.main import cli
from sealchain import config
from sealchain.crypto.keys import PublicKey, SecretKey, generate_keypair
from sealchain.keychain import Keychain


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep the CLI away from the real user configuration."""
    monkeypatch.setattr(config, "user_config_dir", lambda app_name: str(tmp_path / "config"))
    monkeypatch.delenv("SEALCHAIN_KEYCHAIN_DIR", raising=False)
    monkeypatch.delenv("SEALCHAIN_LOG_LEVEL", raising=False)


@pytest.fixture
def key_dir(tmp_path):
    return tmp_path / "keys"


@pytest.fixture
def run(key_dir):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, ["--keychain-dir", str(key_dir), *args])

    return invoke


class TestGenerate:
    """Tests for the top-level generate command."""

    def test_generate_files(self, tmp_path):
        """Test key files are written."""
        public_path = tmp_path / "out.pub.pem"
        secret_path = tmp_path / "out.sec.pem"
        result = CliRunner().invoke(
            cli, ["generate", "--public", str(public_path), "--secret", str(secret_path)]
        )

        assert result.exit_code == 0, result.output
        assert SecretKey.from_file(secret_path).public_key() == PublicKey.from_file(public_path)

    def test_generate_refuses_overwrite(self, tmp_path):
        """Test existing files are not replaced."""
        public_path = tmp_path / "out.pub.pem"
        public_path.write_text("keep")
        result = CliRunner().invoke(
            cli,
            ["generate", "--public", str(public_path), "--secret", str(tmp_path / "s.pem")],
        )

        assert result.exit_code != 0
        assert "already exists" in result.output
        assert public_path.read_text() == "keep"
        assert not (tmp_path / "s.pem").exists()


class TestKeychainCommands:
    """Tests for keychain subcommands."""

    def test_generate_and_list(self, run, key_dir):
        """Test generated keypairs are listed."""
        assert run("keychain", "generate", "bob").exit_code == 0
        assert run("keychain", "generate", "alice").exit_code == 0

        result = run("keychain", "list")
        assert result.exit_code == 0
        assert result.output.splitlines() == ["alice", "bob"]

        result = run("keychain", "list", "--long")
        public = Keychain.open_at(key_dir).get("alice").public
        assert f"alice  {public.to_hex()}" in result.output

    def test_generate_duplicate(self, run):
        """Test duplicate names fail with a non-zero exit."""
        run("keychain", "generate", "alice")
        result = run("keychain", "generate", "alice")
        assert result.exit_code != 0
        assert 'keypair "alice" already exists' in result.output

    def test_invalid_name(self, run):
        """Test invalid names are reported."""
        result = run("keychain", "generate", "bad/name")
        assert result.exit_code != 0
        assert 'invalid character "/"' in result.output

    def test_import_export(self, run, tmp_path):
        """Test import then export round-trips key files."""
        public, secret = generate_keypair()
        public.to_file(tmp_path / "in.pub")
        secret.to_file(tmp_path / "in.sec")

        result = run("keychain", "import", "carol", str(tmp_path / "in.pub"), str(tmp_path / "in.sec"))
        assert result.exit_code == 0, result.output

        out_public = tmp_path / "out.pub"
        out_secret = tmp_path / "out.sec"
        result = run(
            "keychain", "export", "carol", "--public", str(out_public), "--secret", str(out_secret)
        )
        assert result.exit_code == 0, result.output
        assert PublicKey.from_file(out_public) == public
        assert SecretKey.from_file(out_secret) == secret

    def test_export_refuses_overwrite(self, run, key_dir, tmp_path):
        """Test export keeps existing files unless --force is given."""
        public, secret = generate_keypair()
        Keychain.open_at(key_dir).create("carol", public, secret)
        out_public = tmp_path / "out.pub"
        out_secret = tmp_path / "out.sec"
        out_secret.write_text("keep")
        args = ("keychain", "export", "carol", "-p", str(out_public), "-s", str(out_secret))

        result = run(*args)
        assert result.exit_code != 0
        assert "already exists" in result.output
        assert out_secret.read_text() == "keep"
        assert not out_public.exists()

        result = run(*args, "--force")
        assert result.exit_code == 0, result.output
        assert PublicKey.from_file(out_public) == public
        assert SecretKey.from_file(out_secret) == secret

    def test_import_mismatched_pair_warns(self, run, key_dir, tmp_path, caplog):
        """Test importing files that do not belong together warns but stores them."""
        public, _ = generate_keypair()
        _, secret = generate_keypair()
        public.to_file(tmp_path / "in.pub")
        secret.to_file(tmp_path / "in.sec")

        with caplog.at_level(logging.WARNING, logger="cli.main"):
            result = run("keychain", "import", "mixed", str(tmp_path / "in.pub"), str(tmp_path / "in.sec"))

        assert result.exit_code == 0, result.output
        assert "does not match" in caplog.text
        assert Keychain.open_at(key_dir).get("mixed").public == public

    def test_show_and_find(self, run, key_dir, tmp_path):
        """Test show and reverse lookup."""
        public, secret = generate_keypair()
        Keychain.open_at(key_dir).create("dave", public, secret)
        public.to_file(tmp_path / "dave.pub")

        result = run("keychain", "show", "dave")
        assert public.to_hex() in result.output

        result = run("keychain", "find", str(tmp_path / "dave.pub"))
        assert result.exit_code == 0
        assert result.output.strip() == "dave"

        other, _ = generate_keypair()
        other.to_file(tmp_path / "other.pub")
        result = run("keychain", "find", str(tmp_path / "other.pub"))
        assert result.exit_code != 0
        assert "no matching keypair" in result.output

    def test_rename_and_remove(self, run, key_dir):
        """Test rename then remove."""
        run("keychain", "generate", "alice")

        result = run("keychain", "rename", "alice", "bob")
        assert result.exit_code == 0
        assert [str(k.name) for k in Keychain.open_at(key_dir).list()] == ["bob"]

        result = run("keychain", "remove", "bob")
        assert result.exit_code == 0
        assert Keychain.open_at(key_dir).list() == []

        result = run("keychain", "remove", "bob")
        assert result.exit_code != 0
        assert 'keypair "bob" not found' in result.output

    def test_keychain_dir_from_environment(self, tmp_path, monkeypatch):
        """Test SEALCHAIN_KEYCHAIN_DIR selects the keychain."""
        env_dir = tmp_path / "env-keys"
        monkeypatch.setenv("SEALCHAIN_KEYCHAIN_DIR", str(env_dir))

        result = CliRunner().invoke(cli, ["keychain", "generate", "erin"])
        assert result.exit_code == 0, result.output
        assert (env_dir / "erin.pub").is_file()

    def test_default_keychain(self, tmp_path):
        """Test the default keychain lives under the config directory."""
        result = CliRunner().invoke(cli, ["keychain", "generate", "frank"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "config" / "keypairs" / "frank.sec").is_file()

    def test_bad_config(self, tmp_path):
        """Test an unreadable config file aborts."""
        path = tmp_path / "config.yaml"
        path.write_text("logging:\n  level: LOUD\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "keychain", "list"])
        assert result.exit_code != 0
        assert "Invalid configuration" in result.output
