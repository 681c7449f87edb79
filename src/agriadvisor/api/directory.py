"""Directory endpoints — local markets, government offices, bank loan schemes.

Static fixture data with the caller's location interpolated. No external
calls; every entry is built fresh per request.
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter

from agriadvisor.api.schemas import (
    DirectoryRequest,
    ErrorResponse,
    LoanSchemesResponse,
    OrganizationsResponse,
    VendorsResponse,
)
from agriadvisor.core.errors import ValidationError
from agriadvisor.core.types import LoanScheme, Organization, Vendor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["directory"])

_ERROR_RESPONSES = {400: {"model": ErrorResponse, "description": "Missing required field"}}


def local_market_vendors(location: str) -> list[Vendor]:
    return [
        Vendor(name="Mandi A", address=f"{location} Market Area", contact="123-456-7890"),
        Vendor(name="Mandi B", address=f"{location} Central Market", contact="987-654-3210"),
    ]


def government_organizations(location: str) -> list[Organization]:
    return [
        Organization(name="Rythu Bharosa", address=f"{location} Office", contact="111-222-3333"),
        Organization(
            name="Agriculture Dept", address=f"{location} Agriculture Building", contact="444-555-6666",
        ),
    ]


def bank_loan_schemes(location: str, crop: str) -> list[LoanScheme]:
    """Loan schemes are the same everywhere for now; location and crop only gate the request."""
    return [
        LoanScheme(
            scheme="Crop Loan Scheme A", loanAmount="₹1,00,000", interestRate="7%",
            apply="Local Bank Branch",
        ),
        LoanScheme(
            scheme="Agriculture Loan B", loanAmount="₹2,00,000", interestRate="6.5%",
            apply="Online Application",
        ),
    ]


def _require_location_and_crop(request: DirectoryRequest) -> None:
    if not request.location or not request.crop:
        raise ValidationError("Missing location or crop")


@router.post("/local-market", response_model=VendorsResponse, responses=_ERROR_RESPONSES)
async def local_market(request: DirectoryRequest):
    _require_location_and_crop(request)
    vendors = local_market_vendors(request.location)
    return VendorsResponse(vendors=[asdict(v) for v in vendors])


@router.post("/government-organizations", response_model=OrganizationsResponse, responses=_ERROR_RESPONSES)
async def government_offices(request: DirectoryRequest):
    if not request.location:
        raise ValidationError("Missing location")
    organizations = government_organizations(request.location)
    return OrganizationsResponse(organizations=[asdict(o) for o in organizations])


@router.post("/bank-loans", response_model=LoanSchemesResponse, responses=_ERROR_RESPONSES)
async def bank_loans(request: DirectoryRequest):
    _require_location_and_crop(request)
    schemes = bank_loan_schemes(request.location, request.crop)
    logger.debug("Listing %d loan schemes for %s", len(schemes), request.location)
    return LoanSchemesResponse(schemes=[asdict(s) for s in schemes])
