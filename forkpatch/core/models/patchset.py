"""
Patch set model — the static description of what a fork customizes.

Loaded once from forkpatch.yml and frozen. Every workflow receives
the same ``PatchConfig`` instance; nothing here is discovered at runtime.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _check_relative(value: str) -> str:
    path = PurePosixPath(value)
    if not value or path.is_absolute():
        raise ValueError(f"path must be relative: {value!r}")
    if ".." in path.parts:
        raise ValueError(f"path cannot contain '..': {value!r}")
    return value


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class PatchGroup(_Frozen):
    """A named subset of managed files captured in one patch file."""

    file: str                       # patch filename inside patches_dir
    label: str = ""                 # human name used in reports
    files: tuple[str, ...]

    @field_validator("file")
    @classmethod
    def _plain_filename(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"patch file must be a plain filename: {v!r}")
        return v

    @field_validator("files")
    @classmethod
    def _relative_files(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("patch group must list at least one file")
        return tuple(_check_relative(f) for f in v)

    @property
    def display_name(self) -> str:
        return self.label or self.file


class BinaryAsset(_Frozen):
    """A file copied verbatim between the project and the assets directory."""

    name: str               # archived name under <patches_dir>/<assets_dir>/
    destination: str        # path relative to the project root

    @field_validator("name", "destination")
    @classmethod
    def _relative(cls, v: str) -> str:
        return _check_relative(v)


class UpstreamSettings(_Frozen):
    """Where managed files are reset to before patches are reapplied."""

    remote: str = "upstream"
    fallback_remote: str = "origin"
    branch: str = "main"

    @property
    def preferred_ref(self) -> str:
        return f"{self.remote}/{self.branch}"

    @property
    def fallback_ref(self) -> str:
        return f"{self.fallback_remote}/{self.branch}"


class PatchConfig(_Frozen):
    """Root configuration — loaded from forkpatch.yml."""

    name: str = "fork"
    patches_dir: str = "patches"
    assets_dir: str = "assets"      # relative to patches_dir

    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    patches: tuple[PatchGroup, ...] = ()
    external_patches: tuple[str, ...] = ()
    assets: tuple[BinaryAsset, ...] = ()

    @field_validator("patches_dir", "assets_dir")
    @classmethod
    def _relative_dirs(cls, v: str) -> str:
        return _check_relative(v)

    @model_validator(mode="after")
    def _unique_names(self) -> PatchConfig:
        files = [g.file for g in self.patches] + list(self.external_patches)
        dupes = sorted({f for f in files if files.count(f) > 1})
        if dupes:
            raise ValueError(f"duplicate patch files: {', '.join(dupes)}")

        names = [a.name for a in self.assets]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"duplicate asset names: {', '.join(dupes)}")
        return self

    @property
    def managed_files(self) -> tuple[str, ...]:
        """Every file covered by a patch group, in declaration order."""
        seen: dict[str, None] = {}
        for group in self.patches:
            for f in group.files:
                seen.setdefault(f, None)
        return tuple(seen)

    @property
    def patch_files(self) -> tuple[str, ...]:
        """All patch filenames reported by status (groups first)."""
        return tuple(g.file for g in self.patches) + self.external_patches

    def get_group(self, file: str) -> PatchGroup | None:
        """Look up a patch group by its patch filename."""
        for group in self.patches:
            if group.file == file:
                return group
        return None
