"""Pydantic request/response models for the agri advisor API.

These are the API contract — camelCase on the wire, snake_case in Python,
decoupled from the internal domain dataclasses. Required fields are
declared optional; routes report missing ones as 400 `{"error": ...}`.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from agriadvisor.core.types import FarmProfile


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# ---------------------------------------------------------------------------
# Farm profile
# ---------------------------------------------------------------------------

class FarmProfileRequest(CamelModel):
    """Body of POST /api/user-inputs and POST /api/crop-analysis."""

    required_fields: ClassVar[tuple[str, ...]] = (
        "location", "land_size", "land_type", "season", "water_facility", "duration",
    )

    user_id: str | None = None
    location: str | None = None
    land_size: str | None = None
    land_type: str | None = None
    land_health: str | None = None
    season: str | None = None
    water_facility: str | None = None
    duration: str | None = None
    language: str | None = None
    api_key: str | None = None

    def missing_fields(self) -> list[str]:
        return [name for name in self.required_fields if not getattr(self, name)]

    def to_profile(self) -> FarmProfile:
        return FarmProfile(
            location=self.location or "",
            land_size=self.land_size or "",
            land_type=self.land_type or "",
            season=self.season or "",
            water_facility=self.water_facility or "",
            duration=self.duration or "",
            land_health=self.land_health or "",
            language=self.language or "en",
            user_id=self.user_id or "anonymous",
        )


class SaveUserInputResponse(BaseModel):
    success: bool
    id: int


class UserInputRecord(BaseModel):
    """A persisted profile, with the table's column names."""

    id: int
    user_id: str | None = None
    location: str | None = None
    land_size: str | None = None
    land_type: str | None = None
    land_health: str | None = None
    season: str | None = None
    water_facility: str | None = None
    duration: str | None = None
    language: str | None = None
    created_at: str | None = None


# ---------------------------------------------------------------------------
# Crop plan / disease detection
# ---------------------------------------------------------------------------

class CropPlanRequest(CamelModel):
    crop_name: str | None = None
    location: str | None = None
    land_size: str | None = None
    land_type: str | None = None
    season: str | None = None
    language: str | None = None
    api_key: str | None = None


class DiseaseDetectionRequest(CamelModel):
    image_base64: str | None = None
    crop_type: str | None = None


# ---------------------------------------------------------------------------
# Directory lookups
# ---------------------------------------------------------------------------

class DirectoryRequest(CamelModel):
    location: str | None = None
    crop: str | None = None


class VendorResponse(BaseModel):
    name: str
    address: str
    contact: str


class OrganizationResponse(BaseModel):
    name: str
    address: str
    contact: str


class LoanSchemeResponse(BaseModel):
    scheme: str
    loanAmount: str  # noqa: N815
    interestRate: str  # noqa: N815
    apply: str


class VendorsResponse(BaseModel):
    vendors: list[VendorResponse]


class OrganizationsResponse(BaseModel):
    organizations: list[OrganizationResponse]


class LoanSchemesResponse(BaseModel):
    schemes: list[LoanSchemeResponse]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    """Error response body."""

    error: str
    details: str | None = None
