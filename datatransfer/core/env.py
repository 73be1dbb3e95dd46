"""
Environment variable management with .env file support.

Loads .env files, substitutes ``${VAR}`` references inside configuration
documents and collects prefixed environment overrides that are layered on
top of the settings file.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

ENV_PREFIX = "DATATRANSFER_"
ENV_SEPARATOR = "__"

# ${VAR}, ${VAR:-default}, ${VAR:?error}
_SUBSTITUTION = re.compile(r"\$\{([^}:]+)(?::([?-])([^}]*))?\}")


class EnvManager:
    """
    Manages environment variables for transfer runs.

    Example:
        >>> env = EnvManager()
        >>> env.load()  # Loads .env if exists
        >>> env.substitute("AccountEndpoint=${COSMOS_ENDPOINT};")
    """

    def __init__(self, project_root: Path | str | None = None):
        self.project_root = Path(project_root) if project_root else Path.cwd()

    def load(self, env_file: str | Path | None = None, override: bool = False) -> bool:
        """
        Load environment variables from a .env file.

        Args:
            env_file: Path to .env file (defaults to .env in project root)
            override: Whether to override existing environment variables

        Returns:
            True if the file was loaded, False if it does not exist
        """
        env_file = self.project_root / ".env" if env_file is None else Path(env_file)

        if not env_file.exists():
            return False

        load_dotenv(env_file, override=override)
        return True

    def substitute(self, text: str) -> str:
        """
        Substitute environment variables in text.

        Supports:
        - ${VAR} - variable substitution (left untouched when unset)
        - ${VAR:-default} - with default value
        - ${VAR:?error} - required variable (raises ValueError if not set)
        """

        def replace(match):
            var_name, operator, operand = match.group(1), match.group(2), match.group(3)
            value = os.environ.get(var_name)

            if operator == "-":
                return value if value is not None else operand
            if operator == "?":
                if value is None:
                    raise ValueError(operand or f"Required variable not set: {var_name}")
                return value
            return value if value is not None else match.group(0)

        return _SUBSTITUTION.sub(replace, text)

    def substitute_value(self, data: Any) -> Any:
        """Recursively substitute environment variables in strings, dicts and lists."""
        if isinstance(data, str):
            return self.substitute(data)
        if isinstance(data, dict):
            return {key: self.substitute_value(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self.substitute_value(item) for item in data]
        return data

    def overrides(self, prefix: str = ENV_PREFIX) -> dict[str, str]:
        """
        Collect prefixed variables as flat colon-delimited configuration keys.

        ``DATATRANSFER_SinkSettings__FilePath=out.json`` becomes
        ``{"SinkSettings:FilePath": "out.json"}``.
        """
        result = {}
        for key, value in os.environ.items():
            if key.upper().startswith(prefix.upper()) and len(key) > len(prefix):
                result[key[len(prefix):].replace(ENV_SEPARATOR, ":")] = value
        return result


_global_env: EnvManager | None = None


def get_env() -> EnvManager:
    """Get the global environment manager instance."""
    global _global_env
    if _global_env is None:
        _global_env = EnvManager()
    return _global_env
