"""Switch device identifier validation.

Accepted forms:

- ``lid-<N>``: in-band access by LID, passed through unchanged
- ``SW_...``: an MST device node under ``/dev/mst``
- ``/dev/mst/SW_...``: same, with the directory prefix stripped
"""

from __future__ import annotations

import os
from pathlib import Path

from pyibswinfo.constants import LID_DEVICE_PREFIX, MST_DEVICE_DIR, SWITCH_DEVICE_PREFIX
from pyibswinfo.exceptions import ConfigurationError, DeviceError


def normalize_device(device: str, mst_dir: str | Path = MST_DEVICE_DIR) -> str:
    """Validate a device identifier and return the name to pass to the tools.

    Args:
        device: Identifier given on the command line
        mst_dir: Directory holding MST device nodes

    Raises:
        ConfigurationError: If no device was given
        DeviceError: If the name is not a switch device or the node is not
            readable (mst not started)
    """
    if not device:
        raise ConfigurationError("missing device argument")
    if device.startswith(LID_DEVICE_PREFIX):
        return device

    prefix = str(mst_dir).rstrip("/") + "/"
    name = device[len(prefix) :] if device.startswith(prefix) else device
    if not name.startswith(SWITCH_DEVICE_PREFIX):
        raise DeviceError(f"{name} doesn't look like a switch device name")
    if not os.access(Path(mst_dir) / name, os.R_OK):
        raise DeviceError(f"{name} not found in {mst_dir}, is mst started?")
    return name
