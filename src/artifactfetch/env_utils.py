"""
Environment detection helpers.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from artifactfetch.constants import DEV_MARKER_FILE

if TYPE_CHECKING:
    from artifactfetch.config import InstallConfig


def is_development(config: InstallConfig) -> bool:
    """
    Check whether acquisition should be skipped in favour of a local build.

    True when the skip flag was set in the environment the config was built
    from, or when a `.development` marker file exists in the working directory.
    """
    if config.dev_skip:
        return True
    return os.path.exists(os.path.join(config.working_dir, DEV_MARKER_FILE))
