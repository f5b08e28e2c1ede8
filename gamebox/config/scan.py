"""Resource scanning configuration models."""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator

from gamebox.config.base import BaseConfig


def _normalise_suffixes(values: list[str]) -> list[str]:
    normalised: list[str] = []
    for value in values:
        suffix = value.strip().lower()
        if not suffix:
            continue
        if not suffix.startswith("."):
            suffix = f".{suffix}"
        if suffix not in normalised:
            normalised.append(suffix)
    return normalised


class ScanConfig(BaseConfig):
    """How files inside a gamebox are classified during a scan."""

    executable_types: list[str] = Field(
        default_factory=lambda: [".exe", ".com", ".bat"],
        description="File suffixes treated as DOS executables",
    )
    executable_exclusions: list[str] = Field(
        default_factory=lambda: [
            "autoexec.bat",
            "config.sys",
            "dosbox*",
            "goggame*",
            "gfw_*",
            "unins0*",
        ],
        description="Filename globs that are never treated as executables",
    )
    documentation_types: list[str] = Field(
        default_factory=lambda: [
            ".txt",
            ".doc",
            ".docx",
            ".pdf",
            ".rtf",
            ".rtfd",
            ".htm",
            ".html",
            ".md",
            ".nfo",
        ],
        description="File suffixes treated as documentation",
    )
    documentation_name_patterns: list[str] = Field(
        default_factory=lambda: ["readme*", "read.me", "*.1st"],
        description="Filename globs treated as documentation regardless of suffix",
    )
    documentation_exclusions: list[str] = Field(
        default_factory=lambda: [
            "dosbox*",
            "file_id.diz",
            "goggame*",
            "gfw_*",
            "unins0*",
            "install.log",
        ],
        description="Filename globs that are never treated as documentation",
    )
    hdd_volume_types: list[str] = Field(
        default_factory=lambda: [".harddisk"],
        description="Suffixes of hard disk volumes (folders or images)",
    )
    cd_volume_types: list[str] = Field(
        default_factory=lambda: [".cdrom", ".iso", ".cue", ".cdr", ".toast", ".inst"],
        description="Suffixes of CD-ROM volumes (folders or images)",
    )
    floppy_volume_types: list[str] = Field(
        default_factory=lambda: [".floppy", ".img", ".ima", ".vfd", ".flp"],
        description="Suffixes of floppy volumes (folders or images)",
    )

    @field_validator(
        "executable_types",
        "documentation_types",
        "hdd_volume_types",
        "cd_volume_types",
        "floppy_volume_types",
    )
    @classmethod
    def _normalise(cls, value: list[str]) -> list[str]:
        return _normalise_suffixes(value)

    @model_validator(mode="after")
    def _validate_disjoint_types(self) -> "ScanConfig":
        seen: dict[str, str] = {}
        for suffix in self.executable_types:
            seen[suffix] = "executable"
        for kind, suffixes in (
            ("hdd", self.hdd_volume_types),
            ("cd", self.cd_volume_types),
            ("floppy", self.floppy_volume_types),
        ):
            for suffix in suffixes:
                if suffix in seen:
                    raise ValueError(
                        f"Volume suffix '{suffix}' is declared for both {seen[suffix]} and {kind} resources"
                    )
                seen[suffix] = kind
        return self


__all__ = ["ScanConfig"]
