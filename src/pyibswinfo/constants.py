"""Constants shared across pyibswinfo."""

from __future__ import annotations

# Where to get the NVIDIA/Mellanox firmware tools (mst, mlxreg_ext)
MFT_URL = "https://www.mellanox.com/products/adapter-software/firmware-tools"

# External executables
MLXREG_EXECUTABLE = "mlxreg_ext"
MST_EXECUTABLE = "mst"
SMPQUERY_EXECUTABLE = "smpquery"

# Executable -> package that provides it (for dependency error messages)
TOOL_PACKAGES: dict[str, str] = {
    MST_EXECUTABLE: f"MFT ({MFT_URL})",
    MLXREG_EXECUTABLE: f"MFT ({MFT_URL})",
    SMPQUERY_EXECUTABLE: "infiniband-diags",
}

# Environment variables overriding executable paths
ENV_MLXREG = "IBSWINFO_MLXREG"
ENV_MST = "IBSWINFO_MST"
ENV_SMPQUERY = "IBSWINFO_SMPQUERY"

# MST device nodes
MST_DEVICE_DIR = "/dev/mst"
SWITCH_DEVICE_PREFIX = "SW_"
LID_DEVICE_PREFIX = "lid-"

# Node description: 16 words x 4 ASCII characters
MAX_DESCRIPTION_LENGTH = 64
NODE_DESCRIPTION_WORDS = 16

# Prefix marking an error line in mlxreg_ext output
TOOL_ERROR_MARKER = "-E-"

# MTMP temperatures are reported in 1/8 degree Celsius
TEMPERATURE_DIVISOR = 8

# Module (QSFP) temperature sensors start at this MTMP sensor index
MODULE_SENSOR_BASE = 64

# Raw tachometer readings above this are reported halved
FAN_SPEED_HALVING_THRESHOLD = 10000

# High bit set on the PSU power word
PSU_POWER_FLAG = 0x80000000

# CLI exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
