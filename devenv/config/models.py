"""
Pydantic models for configuration validation.

These models define the schema for tool requirements, display access,
key pair lookup, and the bootstrap sequence.
"""

import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


VERSION_PATTERN = re.compile(r"^\d+(\.\d+)*$")


class Ecosystem(str, Enum):
    """Linux package manager families with hard-coded install hints."""
    APK = "apk"
    DNF = "dnf"
    APT = "apt"

    @property
    def distribution(self) -> str:
        """Human readable distribution family."""
        return {
            Ecosystem.APK: "Alpine",
            Ecosystem.DNF: "Fedora",
            Ecosystem.APT: "Ubuntu",
        }[self]


# ============================================================
# Tool Requirements
# ============================================================

class ToolRequirement(BaseModel):
    """A host executable the development environment depends on."""

    name: str = Field(..., description="Display name")
    executable: str = Field(..., description="Executable looked up on PATH")
    version_args: List[str] = Field(
        default_factory=lambda: ["--version"],
        description="Arguments that make the tool print its version",
    )
    minimum_version: Optional[str] = Field(None, description="Minimum dotted version")
    mandatory: bool = Field(default=True, description="Absence halts setup")
    install_hints: Dict[Ecosystem, str] = Field(
        default_factory=dict,
        description="Install command per package ecosystem",
    )
    plugin_host: Optional[str] = Field(
        None,
        description="Executable that may provide this tool as a sub-command",
    )
    plugin_version_args: List[str] = Field(
        default_factory=list,
        description="Arguments passed to plugin_host to query the plugin version",
    )

    model_config = {"frozen": True}

    @field_validator("minimum_version")
    @classmethod
    def validate_minimum_version(cls, v: Optional[str]) -> Optional[str]:
        """Reject minimum versions that are not dotted numbers."""
        if v is None:
            return v
        v = str(v).strip()
        if not VERSION_PATTERN.match(v):
            raise ValueError(f"Invalid minimum version: {v!r}")
        return v

    @model_validator(mode="after")
    def check_plugin(self):
        """A plugin host needs the arguments to query it."""
        if self.plugin_host and not self.plugin_version_args:
            raise ValueError(f"{self.name}: plugin_host requires plugin_version_args")
        return self


# ============================================================
# Advisory Checks
# ============================================================

class DisplayConfig(BaseModel):
    """Display server detection and access grant."""

    env_var: str = Field(default="DISPLAY", description="Display address variable")
    grant_command: List[str] = Field(
        default_factory=lambda: ["xhost", "+local:docker"],
        description="Command that grants containers access to the display",
    )
    install_hints: Dict[Ecosystem, str] = Field(default_factory=dict)

    @field_validator("grant_command")
    @classmethod
    def validate_grant_command(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("grant_command cannot be empty")
        return v


class KeyPairConfig(BaseModel):
    """Where to look for an SSH key pair."""

    directory: str = Field(default="~/.ssh", description="Key directory")
    filenames: List[str] = Field(
        default_factory=lambda: ["id_rsa", "id_ed25519"],
        description="Conventional private key file names",
    )


# ============================================================
# Bootstrap
# ============================================================

class BootstrapConfig(BaseModel):
    """Settings for the build/start sequence run after a passing preflight."""

    image_name: str = Field(default="alpine-dev", description="Image built by make build")
    backup_dir: str = Field(default="backups", description="Directory created before build")
    make_command: str = Field(default="make", description="Build tool executable")
    build_target: str = Field(default="build")
    up_target: str = Field(default="up")
    clone_target: str = Field(default="clone-nvim")


class DevenvConfig(BaseModel):
    """Complete configuration for preflight and bootstrap."""

    tools: List[ToolRequirement] = Field(default_factory=list)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    keys: KeyPairConfig = Field(default_factory=KeyPairConfig)
    docker_group: Optional[str] = Field(
        default="docker",
        description="Group the user should belong to (None disables the check)",
    )
    probe_timeout: float = Field(default=10.0, gt=0, description="Seconds per version probe")
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)

    @field_validator("tools")
    @classmethod
    def validate_unique_tools(cls, v: List[ToolRequirement]) -> List[ToolRequirement]:
        """Ensure tool names are unique."""
        names = [t.name for t in v]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"Duplicate tool names: {', '.join(sorted(duplicates))}")
        return v

    def get_tool(self, name: str) -> Optional[ToolRequirement]:
        """Find a tool requirement by display name or executable."""
        for tool in self.tools:
            if tool.name == name or tool.executable == name:
                return tool
        return None
