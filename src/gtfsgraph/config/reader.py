"""Reader settings loaded from a TOML file and the environment."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from typing import TYPE_CHECKING, Final, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gtfsgraph.domain.model import EntityType
from gtfsgraph.domain.reading import ReaderOptions
from gtfsgraph.domain.schema import DEFAULT_LOAD_ORDER

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_AGENCY_ID_ENV: Final[str] = "GTFSGRAPH_DEFAULT_AGENCY_ID"
_SECTION: Final[str] = "reader"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ReaderSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    default_agency_id: str | None = None
    agency_id_mapping: dict[str, str] = Field(default_factory=dict[str, str])
    overwrite_duplicates: bool = False
    entity_types: tuple[EntityType, ...] = DEFAULT_LOAD_ORDER

    _normalize_default_agency_id = field_validator("default_agency_id", mode="before")(
        _blank_to_none
    )

    @field_validator("entity_types")
    @classmethod
    def _reject_repeated_types(cls, value: tuple[EntityType, ...]) -> tuple[EntityType, ...]:
        repeated = sorted({entity_type for entity_type in value if value.count(entity_type) > 1})
        if repeated:
            raise ValueError(f"entity types listed more than once: {', '.join(repeated)}")
        return value

    def with_overrides(self, **overrides: object) -> ReaderSettings:
        """Return a copy with every non-``None`` override applied and validated."""

        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return ReaderSettings.model_validate(data)

    def to_options(self) -> ReaderOptions:
        return ReaderOptions(
            default_agency_id=self.default_agency_id,
            agency_id_mapping=dict(self.agency_id_mapping),
            overwrite_duplicates=self.overwrite_duplicates,
            entity_types=self.entity_types,
        )


def load_reader_settings(path: Path | None = None) -> ReaderSettings:
    """Load reader settings from ``path`` (a ``[reader]`` table or top-level keys).

    ``GTFSGRAPH_DEFAULT_AGENCY_ID`` supplies the default agency when the file
    does not.
    """

    data: dict[str, object] = {}
    if path is not None:
        data = _read_toml(path)
    if data.get("default_agency_id") is None:
        env_default = os.getenv(DEFAULT_AGENCY_ID_ENV)
        if env_default and env_default.strip():
            data["default_agency_id"] = env_default
    try:
        return ReaderSettings.model_validate(data)
    except ValidationError as exc:
        source = path or DEFAULT_AGENCY_ID_ENV
        raise ConfigurationError(
            f"Invalid reader settings in {source}: {exc}", source=source
        ) from exc


def _read_toml(path: Path) -> dict[str, object]:
    if not path.is_file():
        raise MissingConfigurationError(f"Settings file not found: {path}", source=path)
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(
            f"Settings file {path} is not valid TOML: {exc}", source=path
        ) from exc
    section = document.get(_SECTION, document)
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"[{_SECTION}] in {path} must be a table", source=path)
    return dict(cast("Mapping[str, object]", section))
