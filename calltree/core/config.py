"""Process configuration read from the environment."""

from __future__ import annotations

import os
from pathlib import Path

from calltree.core.exceptions import ConfigurationError

ENV_TRACE_FILE = "CALLTREE_FILE"
ENV_LOG_LEVEL = "CALLTREE_LOG_LEVEL"
ENV_LOG_FORMAT = "CALLTREE_LOG_FORMAT"


def get_trace_path(path: Path | None = None) -> Path:
    """Return the trace file to load.

    An explicit path wins; otherwise ``CALLTREE_FILE`` must be set.

    Raises:
        ConfigurationError: No path given and the variable is unset or empty.
    """
    if path is None:
        value = os.environ.get(ENV_TRACE_FILE, "").strip()
        if not value:
            raise ConfigurationError(
                f"No call tree file configured. Pass --file or set {ENV_TRACE_FILE}."
            )
        path = Path(value)
    return path.expanduser()
