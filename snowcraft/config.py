import logging
import os
from dataclasses import dataclass, field, fields
from typing import Optional

import snowflake.connector
import yaml

logger = logging.getLogger("snowcraft")

AUTHENTICATORS = (
    "snowflake",
    "externalbrowser",
    "oauth",
    "snowflake_jwt",
    "username_password_mfa",
)

DEFAULT_CONFIG_PATH = os.path.join("~", ".snowflake", "config.yml")

_ENV_VARS = {
    "account": "SNOWFLAKE_ACCOUNT",
    "user": "SNOWFLAKE_USER",
    "password": "SNOWFLAKE_PASSWORD",
    "role": "SNOWFLAKE_ROLE",
    "warehouse": "SNOWFLAKE_WAREHOUSE",
    "host": "SNOWFLAKE_HOST",
}

_CONNECTION_FIELDS = (
    "account",
    "user",
    "password",
    "role",
    "warehouse",
    "host",
    "authenticator",
    "private_key_file",
    "private_key_passphrase",
    "database",
    "schema",
)

_DEFAULTS = {
    "dry_run": False,
    "threads": 8,
}


@dataclass
class ClientConfig:
    account: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    warehouse: Optional[str] = None
    host: Optional[str] = None
    authenticator: Optional[str] = None
    private_key_file: Optional[str] = None
    private_key_passphrase: Optional[str] = None
    database: Optional[str] = None
    schema: Optional[str] = None
    dry_run: Optional[bool] = None
    threads: Optional[int] = None
    defaulted: frozenset = field(init=False, repr=False, compare=False, default=frozenset())

    def __post_init__(self):
        # None marks a field as unset, merge_config reads `defaulted` to tell the two apart
        self.defaulted = frozenset(name for name in _DEFAULTS if getattr(self, name) is None)
        for name in self.defaulted:
            setattr(self, name, _DEFAULTS[name])
        if not isinstance(self.dry_run, bool):
            raise ValueError(f"dry_run must be a boolean, got: {self.dry_run!r}")
        if not isinstance(self.threads, int) or isinstance(self.threads, bool) or self.threads < 1:
            raise ValueError(f"threads must be a positive integer, got: {self.threads!r}")
        if self.authenticator is not None:
            self.authenticator = self.authenticator.lower()
            if self.authenticator not in AUTHENTICATORS:
                raise ValueError(f"Unknown authenticator: {self.authenticator}, expected one of {AUTHENTICATORS}")
        if self.password is not None and self.private_key_file is not None:
            raise ValueError("Cannot specify both password and private_key_file")

    def connection_params(self) -> dict:
        params = {}
        for name in _CONNECTION_FIELDS:
            value = getattr(self, name)
            if value is not None:
                params[name] = value
        return params


def default_config() -> ClientConfig:
    return ClientConfig(**{name: os.environ.get(var) for name, var in _ENV_VARS.items()})


def profile_config(profile: str = "default", path: Optional[str] = None) -> Optional[ClientConfig]:
    """
    Read one profile from a YAML profiles file:

        default:
          account: my-org-my-account
          user: deployer
          role: SYSADMIN
          threads: 4
    """
    path = path or os.environ.get("SNOWFLAKE_CONFIG_PATH") or DEFAULT_CONFIG_PATH
    path = os.path.expanduser(path)
    if not os.path.exists(path):
        logger.debug(f"No config file found at {path}")
        return None
    with open(path, "r") as f:
        profiles = yaml.safe_load(f) or {}
    if not isinstance(profiles, dict):
        raise ValueError(f"Config file {path} must contain a mapping of profiles")
    data = profiles.get(profile)
    if data is None:
        return None
    known = {f.name for f in fields(ClientConfig) if f.init}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys in profile {profile}: {sorted(unknown)}")
    return ClientConfig(**data)


def merge_config(base: ClientConfig, override: ClientConfig) -> ClientConfig:
    """Fields left unset on `override` are taken from `base`."""
    values = {}
    for f in fields(ClientConfig):
        if not f.init:
            continue
        value = getattr(override, f.name)
        if value is None or f.name in override.defaulted:
            value = None if f.name in base.defaulted else getattr(base, f.name)
        values[f.name] = value
    return ClientConfig(**values)


def connect(config: ClientConfig):
    params = config.connection_params()
    account = params.get("account")
    # Snowflake rejects the region suffix for accounts in the default us-west-2 region
    if account and account.endswith(".us-west-2"):
        params["account"] = account[: -len(".us-west-2")]
    if "private_key_file" in params:
        params["private_key_file_pwd"] = params.pop("private_key_passphrase", None)
    logger.debug(f"Connecting to account {params.get('account')} as {params.get('user')}")
    return snowflake.connector.connect(**params)
