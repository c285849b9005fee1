# topmark:header:start
#
#   project      : ImageBuild
#   file         : model.py
#   file_relpath : src/imagebuild/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build options model and merge policy.

This module defines:
    - `BuildOptions`: an immutable, validated snapshot handed to the planner.
    - `MutableBuildOptions`: a mutable, tri-state builder used while layering
      defaults, a config file and CLI overrides; it is frozen into
      `BuildOptions` and can be thawed back for edits.

Precedence (lowest to highest):
    1. Built-in defaults (applied in `MutableBuildOptions.freeze`).
    2. The config file (``imagebuild.toml`` or ``[tool.imagebuild]``).
    3. CLI / API overrides.

Every field of `MutableBuildOptions` is ``None`` when unset so that a layer
only overrides what it actually specifies.

Testing guidance:
    - Unit-test merge behavior with synthetic builders (no I/O).
    - Build `BuildOptions` through ``MutableBuildOptions(...).freeze()`` so
      normalization and validation always apply.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

from imagebuild.config.io import (
    get_bool_value_or_none_checked,
    get_int_value_or_none_checked,
    get_string_list_value_or_none_checked,
    get_string_value_or_none_checked,
    load_options_table,
)
from imagebuild.config.keys import Toml
from imagebuild.config.logging import get_logger
from imagebuild.constants import MACHINE_TYPES, PYPROJECT_TOML_NAME
from imagebuild.core.diagnostics import Diagnostic, DiagnosticLog
from imagebuild.core.errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

    from imagebuild.config.io import TomlTable
    from imagebuild.config.logging import ImagebuildLogger

# ArgsLike: generic mapping accepted by `MutableBuildOptions.from_args` (works
# for CLI namespaces and API dicts).
ArgsLike = Mapping[str, Any]

logger: ImagebuildLogger = get_logger(__name__)


def normalize_registry(registry: str) -> str:
    """Return ``registry`` with its first ``:`` replaced by ``/``.

    Registries are sometimes written as ``gcr.io:my-project``; the colon would
    otherwise be read as a tag separator in every image name.
    """
    return registry.replace(":", "/", 1)


def split_directories(values: Iterable[str]) -> list[str]:
    """Split comma-separated directory selections into a flat, ordered list.

    Empty entries are dropped so ``--dirs ""`` means "all directories".
    """
    out: list[str] = []
    for value in values:
        out.extend(part.strip() for part in value.split(",") if part.strip())
    return out


# ------------------ Immutable runtime options ------------------


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Immutable, validated options consumed by the planner.

    Attributes:
        registry (str): Normalized registry prefix, e.g. ``gcr.io/my-project``.
        directories (frozenset[str]): Selected manifest directories; empty means all.
        run_tests (bool): Whether to schedule structure and functional tests.
        require_new_tags (bool): Whether every shippable image name must not
            exist in the registry yet (one preflight check per image).
        first_tag_only (bool): Whether to keep only the first tag per image.
        timeout_seconds (int): Build timeout; ``0`` means "host default".
        machine_type (str | None): Machine type hint for the build host.
        enable_parallel (bool): Allow parallel scheduling when worthwhile.
        force_parallel (bool): Force parallel scheduling; overrides ``enable_parallel``.
        diagnostics (tuple[Diagnostic, ...]): Warnings recorded while merging
            configuration layers.
    """

    registry: str
    directories: frozenset[str] = frozenset()
    run_tests: bool = True
    require_new_tags: bool = False
    first_tag_only: bool = False
    timeout_seconds: int = 0
    machine_type: str | None = None
    enable_parallel: bool = False
    force_parallel: bool = False
    diagnostics: tuple[Diagnostic, ...] = ()

    def selects(self, directory: str) -> bool:
        """Return True if ``directory`` passes the directory filter."""
        return not self.directories or directory in self.directories

    def thaw(self) -> MutableBuildOptions:
        """Return a mutable copy of these options."""
        return MutableBuildOptions(
            registry=self.registry,
            directories=sorted(self.directories),
            run_tests=self.run_tests,
            require_new_tags=self.require_new_tags,
            first_tag_only=self.first_tag_only,
            timeout_seconds=self.timeout_seconds,
            machine_type=self.machine_type,
            enable_parallel=self.enable_parallel,
            force_parallel=self.force_parallel,
            diagnostics=DiagnosticLog.from_iterable(self.diagnostics),
        )


# ------------------ Mutable builder ------------------


@dataclass
class MutableBuildOptions:
    """Mutable, tri-state builder for `BuildOptions`.

    ``None`` means "not specified by this layer". `merge_with` lets a
    higher-precedence layer override the specified fields only.

    Attributes:
        manifest (str | None): Path of the version manifest. Not a planner
            option; carried here so the config file can set it.
        registry (str | None): Registry prefix (required once frozen).
        directories (list[str] | None): Directory selection; empty/None means all.
        run_tests (bool | None): Whether to schedule tests.
        require_new_tags (bool | None): Whether to add preflight tag checks.
        first_tag_only (bool | None): Whether to keep only the first tag.
        timeout_seconds (int | None): Build timeout in seconds.
        machine_type (str | None): Machine type hint.
        enable_parallel (bool | None): Allow parallel scheduling.
        force_parallel (bool | None): Force parallel scheduling.
        config_files (list[str]): Config sources merged into this builder.
        diagnostics (DiagnosticLog): Warnings recorded while merging.
    """

    manifest: str | None = None
    registry: str | None = None
    directories: list[str] | None = None
    run_tests: bool | None = None
    require_new_tags: bool | None = None
    first_tag_only: bool | None = None
    timeout_seconds: int | None = None
    machine_type: str | None = None
    enable_parallel: bool | None = None
    force_parallel: bool | None = None
    config_files: list[str] = field(default_factory=lambda: [])
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)

    # Fields that take part in merging (bookkeeping fields excluded).
    _MERGED_FIELDS = (
        "manifest",
        "registry",
        "directories",
        "run_tests",
        "require_new_tags",
        "first_tag_only",
        "timeout_seconds",
        "machine_type",
        "enable_parallel",
        "force_parallel",
    )

    @classmethod
    def from_toml_table(cls, table: TomlTable, *, where: str) -> MutableBuildOptions:
        """Build a layer from a TOML options table.

        Unknown keys and mistyped values are recorded as warnings and ignored.

        Args:
            table (TomlTable): The options table.
            where (str): TOML location used in warnings (e.g. ``"[tool.imagebuild]"``).

        Returns:
            MutableBuildOptions: The layer; unspecified fields stay ``None``.
        """
        diags = DiagnosticLog()
        kw: dict[str, Any] = {"where": where, "diagnostics": diags, "logger": logger}

        for key in sorted(set(table) - Toml.known_keys()):
            logger.warning("Ignoring unknown key %s.%s", where, key)
            diags.add_warning(f"Ignoring unknown key {where}.{key}")

        return cls(
            manifest=get_string_value_or_none_checked(table, Toml.KEY_MANIFEST, **kw),
            registry=get_string_value_or_none_checked(table, Toml.KEY_REGISTRY, **kw),
            directories=get_string_list_value_or_none_checked(table, Toml.KEY_DIRECTORIES, **kw),
            run_tests=get_bool_value_or_none_checked(table, Toml.KEY_RUN_TESTS, **kw),
            require_new_tags=get_bool_value_or_none_checked(
                table, Toml.KEY_REQUIRE_NEW_TAGS, **kw
            ),
            first_tag_only=get_bool_value_or_none_checked(table, Toml.KEY_FIRST_TAG_ONLY, **kw),
            timeout_seconds=get_int_value_or_none_checked(table, Toml.KEY_TIMEOUT, **kw),
            machine_type=get_string_value_or_none_checked(table, Toml.KEY_MACHINE_TYPE, **kw),
            enable_parallel=get_bool_value_or_none_checked(table, Toml.KEY_ENABLE_PARALLEL, **kw),
            force_parallel=get_bool_value_or_none_checked(table, Toml.KEY_FORCE_PARALLEL, **kw),
            diagnostics=diags,
        )

    @classmethod
    def from_config_file(cls, path: Path) -> MutableBuildOptions:
        """Build a layer from ``imagebuild.toml`` or ``pyproject.toml``.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        table: TomlTable | None = load_options_table(path)
        if table is None:
            layer = cls()
        else:
            where: str = (
                f"[{Toml.SECTION_TOOL}.{Toml.SECTION_IMAGEBUILD}]"
                if path.name == PYPROJECT_TOML_NAME
                else path.name
            )
            layer = cls.from_toml_table(table, where=where)
        layer.config_files.append(str(path))
        logger.info("Loaded build options from %s", path)
        return layer

    @classmethod
    def from_args(cls, args: ArgsLike) -> MutableBuildOptions:
        """Build a layer from CLI arguments or an API mapping.

        Keys mirror the field names; missing keys and ``None`` values leave the
        field unspecified. ``directories`` entries may be comma-separated.
        """
        dirs_raw: Any = args.get("directories")
        directories: list[str] | None = None
        if dirs_raw:
            directories = split_directories(dirs_raw)

        return cls(
            manifest=args.get("manifest"),
            registry=args.get("registry"),
            directories=directories,
            run_tests=args.get("run_tests"),
            require_new_tags=args.get("require_new_tags"),
            first_tag_only=args.get("first_tag_only"),
            timeout_seconds=args.get("timeout_seconds"),
            machine_type=args.get("machine_type"),
            enable_parallel=args.get("enable_parallel"),
            force_parallel=args.get("force_parallel"),
        )

    def merge_with(self, other: MutableBuildOptions) -> MutableBuildOptions:
        """Overlay ``other`` (higher precedence) on top of this builder, in place.

        Args:
            other (MutableBuildOptions): The overriding layer.

        Returns:
            MutableBuildOptions: ``self``, for chaining.
        """
        for name in self._MERGED_FIELDS:
            value = getattr(other, name)
            if value is not None:
                setattr(self, name, value)
        self.config_files.extend(other.config_files)
        self.diagnostics.items.extend(other.diagnostics.items)
        return self

    def freeze(self) -> BuildOptions:
        """Validate, normalize and freeze into `BuildOptions`.

        Returns:
            BuildOptions: The immutable options.

        Raises:
            ConfigurationError: If the registry is missing or empty, the
                timeout is negative, or the machine type is unknown.
        """
        registry: str = (self.registry or "").strip()
        if not registry:
            raise ConfigurationError(
                "The registry option is required (e.g. 'gcr.io/my-project')",
                {"option": "registry"},
            )
        normalized: str = normalize_registry(registry)
        if normalized != registry:
            logger.debug("Normalized registry %r to %r", registry, normalized)

        timeout: int = self.timeout_seconds or 0
        if timeout < 0:
            raise ConfigurationError(
                f"Timeout must be zero (unset) or a positive number of seconds, got {timeout}",
                {"option": "timeout"},
            )

        machine_type: str | None = self.machine_type or None
        if machine_type is not None and machine_type not in MACHINE_TYPES:
            raise ConfigurationError(
                f"Unknown machine type {machine_type!r}; must be one of: "
                f"{', '.join(MACHINE_TYPES)}",
                {"option": "machine_type"},
            )

        return BuildOptions(
            registry=normalized,
            directories=frozenset(self.directories or ()),
            run_tests=True if self.run_tests is None else self.run_tests,
            require_new_tags=bool(self.require_new_tags),
            first_tag_only=bool(self.first_tag_only),
            timeout_seconds=timeout,
            machine_type=machine_type,
            enable_parallel=bool(self.enable_parallel),
            force_parallel=bool(self.force_parallel),
            diagnostics=self.diagnostics.freeze(),
        )

    def __repr__(self) -> str:
        specified = ", ".join(
            f"{f.name}={getattr(self, f.name)!r}"
            for f in fields(self)
            if f.name in self._MERGED_FIELDS and getattr(self, f.name) is not None
        )
        return f"MutableBuildOptions({specified})"
