import functools
import json
import os
import sys
from collections.abc import Mapping, Sequence
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as version_metadata
from pathlib import Path
from typing import Any, Optional

import yaml

from eip1193.logging import logger

DISTRIBUTION_NAME = "eip1193-provider"

_python_version = (
    f"{sys.version_info.major}.{sys.version_info.minor}"
    f".{sys.version_info.micro} {sys.version_info.releaselevel}"
)


def get_package_version() -> str:
    try:
        return str(version_metadata(DISTRIBUTION_NAME))
    except PackageNotFoundError:
        # NOTE: Must handle empty string result here
        return ""


__version__ = get_package_version()


def log_instead_of_fail(default: Optional[Any] = None):
    """
    A decorator for logging errors instead of raising.
    This is useful for methods like __repr__ which shouldn't fail.
    """

    def wrapper(fn):
        @functools.wraps(fn)
        def wrapped(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except Exception as err:
                logger.error(str(err))
                if default:
                    return default

        return wrapped

    return wrapper


def is_named_mapping(value: Any) -> bool:
    """
    ``True`` when the value is a mapping with only string keys.
    """
    return isinstance(value, Mapping) and all(isinstance(k, str) for k in value)


def is_positional_sequence(value: Any) -> bool:
    """
    ``True`` when the value is a list-like sequence. Strings and bytes do not count.
    """
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def load_config(path: Path, expand_envars=True, must_exist=False) -> dict:
    """
    Load a configuration file into memory.
    The configuration file must be a `.json` or `.yaml` or else it will throw ``TypeError``.

    Args:
        path (str): path to filesystem to find.
        expand_envars (bool): ``True`` to expand environment variables in the contents.
        must_exist (bool): ``True`` to raise ``OSError`` when the file is missing.

    Returns:
        dict: Configured settings parsed from a config file.
    """
    if path.is_file():
        contents = path.read_text()
        if expand_envars:
            contents = os.path.expandvars(contents)

        if path.suffix in (".json",):
            config = json.loads(contents)
        elif path.suffix in (".yml", ".yaml"):
            config = yaml.safe_load(contents)
        else:
            raise TypeError(f"Cannot parse '{path.suffix}' files!")

        return config or {}

    elif must_exist:
        raise OSError(f"{path} does not exist!")

    return {}
