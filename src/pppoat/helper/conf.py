"""
Configuration store

Flat key/value options as the transport modules consume them. Values can
come from a dict, ``key=value`` command line arguments, ``PPPOAT_*``
environment variables or a ``.env`` file.
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from dotenv import dotenv_values

from pppoat.com.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "PPPOAT_"

_TRUE_VALUES = frozenset({"true", "1", "yes", "on", "y"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off", "n", ""})


def obj_is_true(value: Any, strict: bool = True) -> bool:
    """
    Interpret a boolean-like option value.

    :param value: ``bool``, number or string such as ``"true"``/``"0"``.
    :param strict: Reject unknown strings. Otherwise anything not truthy is
        ``False``.
    :return: ``True`` for truthy values.
    :raises ConfigurationError: If *strict* and a string is neither truthy
        nor falsy.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    if not strict:
        return False
    raise ConfigurationError("bool", f"'{value}' is not a boolean value")


class Config:
    """
    Option store shared by the application and its modules.

    Keys are case insensitive and stored lower case. Later sources override
    earlier ones when merged.
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = {}
        for key, value in (values or {}).items():
            self.set(key, value)

    @classmethod
    def from_args(cls, args: Iterable[str]) -> "Config":
        """
        Build a config from ``key=value`` arguments.

        :raises ConfigurationError: If an argument has no ``=``.
        """
        values: Dict[str, str] = {}
        for arg in args:
            key, sep, value = arg.partition("=")
            if not sep or not key:
                raise ConfigurationError(arg, "expected key=value")
            values[key.strip()] = value.strip()
        return cls(values)

    @classmethod
    def from_environ(cls, environ: Optional[Dict[str, str]] = None, prefix: str = ENV_PREFIX) -> "Config":
        """Collect ``PPPOAT_<KEY>`` variables, the prefix is stripped."""
        environ = os.environ if environ is None else environ
        return cls({
            key[len(prefix):]: value
            for key, value in environ.items()
            if key.startswith(prefix) and len(key) > len(prefix)
        })

    @classmethod
    def from_env_file(cls, env_path: Union[str, Path], prefix: str = ENV_PREFIX) -> "Config":
        """
        Read a ``.env`` file.

        Keys with the ``PPPOAT_`` prefix have it stripped, other keys are
        taken as they are.

        :raises FileNotFoundError: If the file does not exist.
        """
        env_path = Path(env_path)
        if not env_path.is_file():
            raise FileNotFoundError(f"Config file not found: {env_path}")
        values = {}
        for key, value in dotenv_values(env_path).items():
            if value is None:
                continue
            if key.startswith(prefix):
                key = key[len(prefix):]
            values[key] = value
        logger.debug("Loaded %d option(s) from %s", len(values), env_path)
        return cls(values)

    def merge(self, other: "Config") -> "Config":
        """Return a new config with *other* taking precedence."""
        merged = Config(self._values)
        for key, value in other.items():
            merged.set(key, value)
        return merged

    def set(self, key: str, value: Any) -> None:
        self._values[key.lower()] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key.lower(), default)

    def is_true(self, key: str, default: bool = False, strict: bool = True) -> bool:
        """
        Boolean-like lookup, absent keys yield *default*.

        With ``strict=False`` unknown values count as false instead of raising.
        """
        value = self.get(key)
        if value is None:
            return default
        try:
            return obj_is_true(value, strict)
        except ConfigurationError:
            raise ConfigurationError(key, f"'{value}' is not a boolean value")

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        """
        Integer lookup. Accepts decimal and ``0x`` prefixed strings.

        :raises ConfigurationError: If the value is not an integer.
        """
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return int(str(value).strip(), 0)
        except ValueError:
            raise ConfigurationError(key, f"'{value}' is not an integer")

    def items(self):
        return self._values.items()

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._values

    def __repr__(self) -> str:
        return f"Config({self._values!r})"
