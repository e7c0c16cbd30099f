"""
.env file support.
load_environ() builds a mapping for Genv(environ=...) without mutating os.environ;
load_env() is the usual load_dotenv() call for applications that prefer it.
"""

import logging
import os
from typing import Mapping

from dotenv import dotenv_values, find_dotenv, load_dotenv

logger = logging.getLogger(__name__)


def load_environ(
    path: str | os.PathLike[str] | None = None,
    *,
    override: bool = False,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Merge a .env file with the process environment (or base).
    With override=False the process environment wins over the file.
    Keys declared without a value in the file are ignored.
    """
    if path is None:
        path = find_dotenv(usecwd=True)
    file_values = {k: v for k, v in dotenv_values(path).items() if v is not None}
    logger.debug("Loaded %d value(s) from %s", len(file_values), path or "<no .env found>")
    process = dict(os.environ if base is None else base)
    if override:
        return {**process, **file_values}
    return {**file_values, **process}


def load_env(*, override: bool = False) -> bool:
    """Load the nearest .env into os.environ. Returns True if a file set anything."""
    return load_dotenv(find_dotenv(usecwd=True), override=override)
