"""Run configuration for a pyibswinfo query.

Example:
    config = QueryConfig(device="SW_MT54000_ibswitch_lid-0x0001", category="vitals")
    config.validate()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from pyibswinfo.constants import (
    ENV_MLXREG,
    ENV_MST,
    ENV_SMPQUERY,
    MAX_DESCRIPTION_LENGTH,
    MLXREG_EXECUTABLE,
    MST_EXECUTABLE,
    SMPQUERY_EXECUTABLE,
)
from pyibswinfo.exceptions import ConfigurationError
from pyibswinfo.registers.plan import OutputCategory


@dataclass
class QueryConfig:
    """Options for one ``ibswinfo`` run.

    Attributes:
        device: MST device name or ``lid-N``
        category: Output category; None means no explicit selection (full
            output)
        module_temperatures: Read per-module (QSFP) temperatures; ignored
            for the inventory and status categories
        description: New node description to set instead of querying
        timeout: Per-command timeout in seconds (None = wait indefinitely)
        mlxreg: ``mlxreg_ext`` executable
        mst: ``mst`` executable
        smpquery: ``smpquery`` executable
    """

    device: str
    category: OutputCategory | None = None
    module_temperatures: bool = False
    description: str | None = None
    timeout: float | None = None
    mlxreg: str = MLXREG_EXECUTABLE
    mst: str = MST_EXECUTABLE
    smpquery: str = SMPQUERY_EXECUTABLE

    def __post_init__(self) -> None:
        """Resolve the category and drop module temperatures where unused."""
        if isinstance(self.category, str) and not isinstance(self.category, OutputCategory):
            try:
                self.category = OutputCategory(self.category)
            except ValueError:
                choices = "|".join(c.value for c in OutputCategory if c is not OutputCategory.ALL)
                raise ConfigurationError(
                    f"unknown output requested, not in {choices}"
                ) from None
        if self.category in (OutputCategory.INVENTORY, OutputCategory.STATUS):
            self.module_temperatures = False

    @property
    def output_category(self) -> OutputCategory:
        """Category to collect (ALL when none was selected)."""
        return self.category or OutputCategory.ALL

    @property
    def is_write(self) -> bool:
        return self.description is not None

    def validate(self) -> None:
        """Check options before any hardware interaction.

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        if not self.device:
            raise ConfigurationError("missing device argument")
        if self.description is not None:
            if len(self.description) > MAX_DESCRIPTION_LENGTH:
                raise ConfigurationError(
                    f"description string > {MAX_DESCRIPTION_LENGTH} characters"
                )
            if not self.description.isascii():
                raise ConfigurationError("description must be ASCII text")
            if self.category is not None or self.module_temperatures:
                raise ConfigurationError(
                    "conflicting options, can't get and set info at the same time"
                )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    @classmethod
    def from_env(cls, device: str, **kwargs: Any) -> QueryConfig:
        """Create a configuration with executables overridable from the environment."""
        kwargs.setdefault("mlxreg", os.environ.get(ENV_MLXREG, MLXREG_EXECUTABLE))
        kwargs.setdefault("mst", os.environ.get(ENV_MST, MST_EXECUTABLE))
        kwargs.setdefault("smpquery", os.environ.get(ENV_SMPQUERY, SMPQUERY_EXECUTABLE))
        return cls(device=device, **kwargs)
