from unittest.mock import patch

import pytest

from snowcraft.config import ClientConfig, connect, default_config, merge_config, profile_config


class TestClientConfig:
    def test_defaults(self):
        config = ClientConfig()
        assert config.dry_run is False
        assert config.threads == 8

    @pytest.mark.parametrize("threads", [0, -1, True, "4"])
    def test_invalid_threads(self, threads):
        with pytest.raises(ValueError):
            ClientConfig(threads=threads)

    def test_dry_run_must_be_boolean(self):
        with pytest.raises(ValueError):
            ClientConfig(dry_run="yes")

    def test_defaulted_fields(self):
        assert ClientConfig().defaulted == {"dry_run", "threads"}
        assert ClientConfig(dry_run=False, threads=8).defaulted == set()

    def test_authenticator_is_normalized(self):
        assert ClientConfig(authenticator="EXTERNALBROWSER").authenticator == "externalbrowser"

    def test_unknown_authenticator(self):
        with pytest.raises(ValueError):
            ClientConfig(authenticator="ldap")

    def test_password_and_key_conflict(self):
        with pytest.raises(ValueError):
            ClientConfig(password="p", private_key_file="/tmp/key.p8")

    def test_connection_params_skip_unset(self):
        config = ClientConfig(account="acct", user="u", threads=2)
        assert config.connection_params() == {"account": "acct", "user": "u"}


class TestDefaultConfig:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SNOWFLAKE_ACCOUNT", "acct")
        monkeypatch.setenv("SNOWFLAKE_USER", "deployer")
        monkeypatch.setenv("SNOWFLAKE_ROLE", "SYSADMIN")
        monkeypatch.delenv("SNOWFLAKE_PASSWORD", raising=False)
        monkeypatch.delenv("SNOWFLAKE_WAREHOUSE", raising=False)
        monkeypatch.delenv("SNOWFLAKE_HOST", raising=False)

        config = default_config()

        assert config.account == "acct"
        assert config.user == "deployer"
        assert config.role == "SYSADMIN"
        assert config.password is None


class TestProfileConfig:
    def test_reads_profile(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("default:\n  account: acct\n  user: deployer\n  threads: 4\nci:\n  dry_run: true\n")

        config = profile_config(path=str(path))
        assert config.account == "acct"
        assert config.threads == 4

        assert profile_config("ci", path=str(path)).dry_run is True

    def test_missing_file(self, tmp_path):
        assert profile_config(path=str(tmp_path / "missing.yml")) is None

    def test_missing_profile(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("default:\n  account: acct\n")
        assert profile_config("other", path=str(path)) is None

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yml"
        path.write_text("default:\n  account: from_env\n")
        monkeypatch.setenv("SNOWFLAKE_CONFIG_PATH", str(path))
        assert profile_config().account == "from_env"

    def test_unknown_keys(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("default:\n  acount: typo\n")
        with pytest.raises(ValueError) as excinfo:
            profile_config(path=str(path))
        assert "acount" in str(excinfo.value)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            profile_config(path=str(path))


class TestMergeConfig:
    def test_override_wins_where_set(self):
        base = ClientConfig(account="acct", user="base", threads=4)
        override = ClientConfig(user="override", dry_run=True)

        merged = merge_config(base, override)

        assert merged.account == "acct"
        assert merged.user == "override"
        assert merged.threads == 4
        assert merged.dry_run is True

    @pytest.mark.parametrize(
        "override, expected",
        [
            (ClientConfig(dry_run=False), (False, 4)),
            (ClientConfig(threads=8), (True, 8)),
            (ClientConfig(dry_run=False, threads=8), (False, 8)),
            (ClientConfig(), (True, 4)),
        ],
    )
    def test_explicit_defaults_on_override_win(self, override, expected):
        base = ClientConfig(dry_run=True, threads=4)

        merged = merge_config(base, override)

        assert (merged.dry_run, merged.threads) == expected

    def test_unset_on_both_stays_defaulted(self):
        merged = merge_config(ClientConfig(account="a"), ClientConfig(user="u"))

        assert (merged.dry_run, merged.threads) == (False, 8)
        assert merged.defaulted == {"dry_run", "threads"}


class TestConnect:
    @patch("snowflake.connector.connect")
    def test_strips_default_region(self, mock_connect):
        connect(ClientConfig(account="xy12345.us-west-2", user="u", password="p"))
        mock_connect.assert_called_once_with(account="xy12345", user="u", password="p")

    @patch("snowflake.connector.connect")
    def test_keeps_other_regions(self, mock_connect):
        connect(ClientConfig(account="xy12345.us-east-1", user="u"))
        mock_connect.assert_called_once_with(account="xy12345.us-east-1", user="u")

    @patch("snowflake.connector.connect")
    def test_private_key_passphrase(self, mock_connect):
        connect(ClientConfig(account="a", user="u", private_key_file="/tmp/key.p8", private_key_passphrase="secret"))
        mock_connect.assert_called_once_with(
            account="a", user="u", private_key_file="/tmp/key.p8", private_key_file_pwd="secret"
        )
