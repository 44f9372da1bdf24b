"""Configuration models describing peelfs settings."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CANDIDATE_MEMBERS = ["ipfilter.dat", "guarding.p2p", "guardian.p2p"]


class PeelBaseModel(BaseModel):
    """Shared configuration for peelfs Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class UnpackingSettings(PeelBaseModel):
    """Options governing archive unpacking.

    Attributes:
        candidate_members: Member names extracted from zip archives, matched
            case-insensitively in archive order.
        chunk_size: Number of bytes copied per read while unpacking.
        max_layers: Optional cap on the number of nested layers peeled.
    """

    candidate_members: List[str] = Field(default_factory=lambda: list(DEFAULT_CANDIDATE_MEMBERS))
    chunk_size: int = Field(default=10_240, gt=0)
    max_layers: Optional[int] = Field(default=None, ge=1)

    @field_validator("candidate_members")
    @classmethod
    def _lowercase_members(cls, value: List[str]) -> List[str]:
        return [member.lower() for member in value]


class FilesystemSettings(PeelBaseModel):
    """Filesystem capability detection options.

    Attributes:
        capability_provider: `probe` always probes, `restricted` assumes
            FAT32-style naming, `auto` picks based on the platform.
    """

    capability_provider: Literal["auto", "probe", "restricted"] = "auto"


class DiscoverySettings(PeelBaseModel):
    """Directory enumeration defaults used when unpacking whole directories.

    Attributes:
        pattern: Glob pattern selecting files to unpack.
        include_hidden: Whether dot-files are considered.
    """

    pattern: str = "*"
    include_hidden: bool = False


class LoggingSettings(PeelBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path; rotated when set.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 3


class CLIOptions(PeelBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
    """

    quiet_default: bool = False


class PeelConfig(PeelBaseModel):
    """Top-level configuration struct for peelfs.

    Attributes:
        unpacking: Archive unpacking settings.
        filesystem: Capability detection settings.
        discovery: Directory enumeration settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    unpacking: UnpackingSettings = Field(default_factory=UnpackingSettings)
    filesystem: FilesystemSettings = Field(default_factory=FilesystemSettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DEFAULT_CANDIDATE_MEMBERS",
    "PeelBaseModel",
    "UnpackingSettings",
    "FilesystemSettings",
    "DiscoverySettings",
    "LoggingSettings",
    "CLIOptions",
    "PeelConfig",
]
