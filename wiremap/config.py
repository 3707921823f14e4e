"""
Configuration file loading

A project can ship a ``wiremap_config.py`` next to its composition root
with explicit bindings for what autowiring cannot build on its own:
interfaces, and classes that need option values::

    # wiremap_config.py
    from app.logging import FileLogger, LoggerInterface

    BINDINGS = {
        LoggerInterface: lambda: FileLogger("/var/log/app.log"),
        "app.payments.Client": lambda resolver: resolver.get(SandboxClient),
    }
"""

import logging
import os
import runpy
from typing import Any, Mapping

from .exceptions import WiremapConfigError

logger = logging.getLogger(__name__)

BINDINGS_NAME = "BINDINGS"


def load_config_file(path: str) -> Mapping[Any, Any]:
    """Execute a configuration file and return its bindings.

    Args:
        path: Path to the configuration file

    Returns:
        The ``BINDINGS`` mapping, or an empty mapping if the file does
        not exist

    Raises:
        WiremapConfigError: When the file does not define a ``BINDINGS``
            mapping
    """
    if not os.path.isfile(path):
        return {}

    namespace = runpy.run_path(path, run_name="wiremap_config")
    bindings = namespace.get(BINDINGS_NAME)
    if not isinstance(bindings, Mapping):
        raise WiremapConfigError(
            f"{path} must define a {BINDINGS_NAME} mapping of class to factory, "
            f"got {type(bindings).__name__}"
        )

    logger.debug("Loaded %d bindings from %s", len(bindings), path)
    return bindings
