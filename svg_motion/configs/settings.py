"""Versioned conversion settings.

Each schema version is its own frozen pydantic model.  Stored settings of
any known version are validated against *their own* schema and then moved
forward one version at a time by pure upgrade functions:

    v1 --(dpi -> resolution, add origin)--> v2
    v2 --(origin policy, flat machine flags, comment style)--> v3

``try_upgrade`` plans the whole path before applying anything, so an
unsupported request never produces a half-upgraded object.  There is no
downgrade path.

Units:
    - Geometry: device millimetres
    - ``resolution``: device millimetres per document unit
    - ``feedrate``: device units per minute (emitted verbatim as ``F``)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

MM_PER_INCH = 25.4


class VersionError(Exception):
    """Raised when settings cannot be moved to the requested schema version."""

    pass


class UnsupportedVersion(VersionError):
    """No upgrade edge exists from the current version toward the target."""

    pass


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ============================================================================
# SCHEMA V1
# ============================================================================

class ConversionConfigV1(_Frozen):
    """Curve conversion options (v1)."""
    tolerance: float = Field(0.002, gt=0.0, description="Max deviation (mm)")
    feedrate: float = Field(300.0, gt=0.0, description="Drawing speed")
    dpi: float = Field(96.0, gt=0.0, description="Document dots per inch")


class SupportedFunctionality(_Frozen):
    """Optional controller features (v1, v2)."""
    circular_interpolation: bool = Field(False, description="G2/G3 support")


class MachineConfigV1(_Frozen):
    """Machine capabilities and literal G-code snippets (v1, v2)."""
    supported_functionality: SupportedFunctionality = SupportedFunctionality()
    tool_on_sequence: Optional[str] = None
    tool_off_sequence: Optional[str] = None
    begin_sequence: Optional[str] = None
    end_sequence: Optional[str] = None


class PostprocessConfigV1(_Frozen):
    """Output formatting toggles (v1, v2)."""
    checksums: bool = False
    line_numbers: bool = False


class SettingsV1(_Frozen):
    """Settings schema v1."""
    schema_version: Literal[1] = 1
    conversion: ConversionConfigV1 = ConversionConfigV1()
    machine: MachineConfigV1 = MachineConfigV1()
    postprocess: PostprocessConfigV1 = PostprocessConfigV1()


# ============================================================================
# SCHEMA V2
# ============================================================================

Origin = Tuple[Optional[float], Optional[float]]


class ConversionConfigV2(_Frozen):
    """Curve conversion options (v2)."""
    tolerance: float = Field(0.002, gt=0.0, description="Max deviation (mm)")
    feedrate: float = Field(300.0, gt=0.0, description="Drawing speed")
    resolution: float = Field(
        MM_PER_INCH / 96.0, gt=0.0, description="Device mm per document unit"
    )
    origin: Origin = Field((0.0, 0.0), description="Device position of the drawing")


class SettingsV2(_Frozen):
    """Settings schema v2."""
    schema_version: Literal[2] = 2
    conversion: ConversionConfigV2 = ConversionConfigV2()
    machine: MachineConfigV1 = MachineConfigV1()
    postprocess: PostprocessConfigV1 = PostprocessConfigV1()


# ============================================================================
# SCHEMA V3 (current)
# ============================================================================

OriginPolicy = Literal["document", "min_corner", "center"]
CommentStyle = Literal["semicolon", "parentheses", "none"]


class ConversionConfig(_Frozen):
    """Curve conversion and placement options."""
    tolerance: float = Field(0.002, gt=0.0, description="Max deviation (mm)")
    feedrate: float = Field(300.0, gt=0.0, description="Drawing speed")
    resolution: float = Field(
        MM_PER_INCH / 96.0, gt=0.0, description="Device mm per document unit"
    )
    origin: Origin = Field((0.0, 0.0), description="Device position of the anchor")
    origin_policy: OriginPolicy = Field(
        "min_corner", description="Which bounding-box point lands on origin"
    )
    extra_attribute_name: Optional[str] = Field(
        None, description="Element attribute copied into comments"
    )


class MachineConfig(_Frozen):
    """Machine capabilities and literal G-code snippets."""
    supports_circular_interpolation: bool = False
    tool_on_sequence: Optional[str] = None
    tool_off_sequence: Optional[str] = None
    begin_sequence: Optional[str] = None
    end_sequence: Optional[str] = None


class PostprocessConfig(_Frozen):
    """Output formatting toggles."""
    line_numbers: bool = False
    checksums: bool = False
    comment_style: CommentStyle = "semicolon"
    line_number_base: int = Field(1, ge=0)
    decimal_places: int = Field(3, ge=0, le=9)

    @field_validator("comment_style", mode="before")
    @classmethod
    def normalise_comment_style(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class Settings(_Frozen):
    """Settings schema v3 (current)."""
    schema_version: Literal[3] = 3
    conversion: ConversionConfig = ConversionConfig()
    machine: MachineConfig = MachineConfig()
    postprocess: PostprocessConfig = PostprocessConfig()


AnySettings = Union[SettingsV1, SettingsV2, Settings]

SETTINGS_VERSIONS: dict[int, type[BaseModel]] = {
    1: SettingsV1,
    2: SettingsV2,
    3: Settings,
}

LATEST_VERSION = 3


# ============================================================================
# UPGRADE EDGES
# ============================================================================

def _upgrade_v1_to_v2(old: SettingsV1) -> SettingsV2:
    conv = old.conversion
    return SettingsV2(
        conversion=ConversionConfigV2(
            tolerance=conv.tolerance,
            feedrate=conv.feedrate,
            resolution=MM_PER_INCH / conv.dpi,
            origin=(0.0, 0.0),
        ),
        machine=old.machine,
        postprocess=old.postprocess,
    )


def _upgrade_v2_to_v3(old: SettingsV2) -> Settings:
    conv = old.conversion
    mach = old.machine
    return Settings(
        conversion=ConversionConfig(
            tolerance=conv.tolerance,
            feedrate=conv.feedrate,
            resolution=conv.resolution,
            origin=conv.origin,
        ),
        machine=MachineConfig(
            supports_circular_interpolation=(
                mach.supported_functionality.circular_interpolation
            ),
            tool_on_sequence=mach.tool_on_sequence,
            tool_off_sequence=mach.tool_off_sequence,
            begin_sequence=mach.begin_sequence,
            end_sequence=mach.end_sequence,
        ),
        postprocess=PostprocessConfig(
            line_numbers=old.postprocess.line_numbers,
            checksums=old.postprocess.checksums,
        ),
    )


UPGRADES: dict[int, Callable[[Any], Any]] = {
    1: _upgrade_v1_to_v2,
    2: _upgrade_v2_to_v3,
}
"""One edge per adjacent version pair, keyed by the source version."""


def upgrade_path(source: int, target: int) -> list[Callable[[Any], Any]]:
    """Upgrade functions leading from *source* to *target*, in order.

    Raises
    ------
    UnsupportedVersion
        If *target* is older than *source* or an edge is missing.
    """
    if target < source:
        raise UnsupportedVersion(
            f"Cannot downgrade settings from v{source} to v{target}"
        )
    steps = []
    version = source
    while version != target:
        edge = UPGRADES.get(version)
        if edge is None:
            raise UnsupportedVersion(
                f"No upgrade defined from settings v{version} "
                f"(requested v{target})"
            )
        steps.append(edge)
        version += 1
    return steps


def try_upgrade(settings: AnySettings, target_version: int = LATEST_VERSION) -> AnySettings:
    """Move *settings* forward to *target_version*.

    Parameters
    ----------
    settings : SettingsV1 | SettingsV2 | Settings
        Validated settings of any known version.
    target_version : int
        Schema version to reach.  Defaults to the latest.

    Returns
    -------
    SettingsV1 | SettingsV2 | Settings
        A new object; *settings* is never modified.

    Raises
    ------
    UnsupportedVersion
        If no chain of upgrade edges reaches *target_version*.
    """
    source = settings.schema_version
    steps = upgrade_path(source, target_version)
    for step in steps:
        settings = step(settings)
    if steps:
        logger.info("Upgraded settings v%d -> v%d", source, target_version)
    return settings


def settings_from_dict(data: dict[str, Any]) -> AnySettings:
    """Validate a raw mapping against the schema its version names.

    A mapping without ``schema_version`` is treated as v1, the version that
    predates the field.

    Raises
    ------
    UnsupportedVersion
        If ``schema_version`` is not a known version.
    pydantic.ValidationError
        If the mapping does not satisfy that version's schema.
    """
    version = data.get("schema_version", 1)
    known = isinstance(version, int) and not isinstance(version, bool)
    model = SETTINGS_VERSIONS.get(version) if known else None
    if model is None:
        raise UnsupportedVersion(f"Unknown settings schema version: {version!r}")
    return model.model_validate({**data, "schema_version": version})
