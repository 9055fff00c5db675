"""
Configuration settings for the interpolation engines.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from geokrig.core.exceptions import ConfigurationError
from geokrig.core.linalg import DEFAULT_PIVOT_TOLERANCE
from geokrig.geostat.variogram import VariogramModel

SettingsT = TypeVar("SettingsT", bound=BaseModel)


class KrigingSettings(BaseModel):
    """Settings for the simple-kriging engine.

    ``sill`` and ``range`` left unset are estimated from the samples; an
    unset ``nugget`` is then estimated too, and defaults to 0 otherwise.
    """

    model: VariogramModel = Field(
        default=VariogramModel.EXPONENTIAL, description="Variogram model"
    )
    nugget: float | None = Field(default=None, ge=0, description="Nugget effect")
    sill: float | None = Field(default=None, gt=0, description="Variogram sill")
    range: float | None = Field(default=None, gt=0, description="Correlation range")
    tolerance: float = Field(
        default=DEFAULT_PIVOT_TOLERANCE, gt=0, description="Singular pivot tolerance"
    )
    strict: bool = Field(
        default=False, description="Raise on singular pivots instead of degrading"
    )

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("model", mode="before")
    @classmethod
    def _resolve_model(cls, value: Any) -> VariogramModel:
        return VariogramModel(value)

    @model_validator(mode="after")
    def _check_sill(self) -> KrigingSettings:
        if self.sill is not None and self.nugget is not None and self.sill <= self.nugget:
            raise ValueError(f"sill ({self.sill}) must exceed nugget ({self.nugget})")
        return self

    @property
    def needs_fit(self) -> bool:
        """Return True if sill or range must be estimated from samples."""
        return self.sill is None or self.range is None


class IDWSettings(BaseModel):
    """Settings for the inverse-distance engine."""

    power: float = Field(default=2.0, gt=0, description="Distance exponent")
    min_distance: float = Field(
        default=1e-4, ge=0, description="Distance below which a sample value is returned as is"
    )

    model_config = {"extra": "forbid", "frozen": True}


def resolve_settings(
    settings_cls: type[SettingsT],
    settings: SettingsT | dict[str, Any] | None = None,
    **overrides: Any,
) -> SettingsT:
    """
    Merge a settings object or mapping with keyword overrides.

    Raises
    ------
    ConfigurationError
        If the merged values fail validation.
    """
    if isinstance(settings, BaseModel):
        base = settings.model_dump()
    else:
        base = dict(settings or {})
    base.update(overrides)
    try:
        return settings_cls.model_validate(base)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid {settings_cls.__name__}: {exc}") from exc
