"""User identity configuration.

The identity recorded on commits lives in ``.snapvcs/config.json`` as
``{"username": ..., "email": ...}``. It is loaded explicitly and handed to
the commit builder; nothing caches it on the repository object.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from snapvcs.constants import CONFIG_JSON
from snapvcs.errors import ConfigMissingError, FormatError, RepositoryIOError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """Author identity used for commits."""

    username: str
    email: str

    @property
    def author(self) -> str:
        return f"{self.username} <{self.email}>"

    def to_dict(self) -> dict:
        return {"username": self.username, "email": self.email}


def save_config(repo_dir: Path, config: Config) -> Path:
    """Write the identity to config.json, replacing any previous one.

    Raises:
        ValueError: If username or email is blank
        RepositoryIOError: If the file can't be written
    """
    if not config.username.strip() or not config.email.strip():
        raise ValueError("Username and email must not be empty")

    config_path = Path(repo_dir) / CONFIG_JSON
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=repo_dir,
            prefix=".tmp_config_",
            suffix=".json",
        )
    except OSError as e:
        raise RepositoryIOError(f"Failed to write config: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, config_path)
    except OSError as e:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise RepositoryIOError(f"Failed to write config: {e}") from e

    logger.debug("Saved config for %s", config.author)
    return config_path


def load_config(repo_dir: Path) -> Config:
    """Load the identity from config.json.

    Raises:
        ConfigMissingError: If the file is absent, empty, or lacks a field
        FormatError: If the file is not valid JSON
        RepositoryIOError: If the file can't be read
    """
    config_path = Path(repo_dir) / CONFIG_JSON
    try:
        content = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigMissingError() from e
    except OSError as e:
        raise RepositoryIOError(f"Failed to read config: {e}") from e

    if not content.strip():
        raise ConfigMissingError()

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise FormatError(f"Corrupted config file: {e}") from e

    if not isinstance(data, dict):
        raise FormatError("Config file must contain a JSON object")

    username = data.get("username")
    email = data.get("email")
    for field, value in (("username", username), ("email", email)):
        if not isinstance(value, str) or not value.strip():
            raise ConfigMissingError(f"'{field}' is not configured")

    return Config(username=username, email=email)
