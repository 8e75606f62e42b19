"""Handyman profile API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import OptionalUser
from api.v1.dependencies import get_handyman_service
from api.v1.schemas.handyman import (
    AvailabilitySchema,
    HandymanCreate,
    HandymanDetailResponse,
    HandymanOptionsResponse,
    HandymanResponse,
    HandymanUpdate,
)
from core.rate_limit import limiter
from domain.entities.handyman import HandymanProfile
from domain.services.handyman_service import HandymanService
from infrastructure.auth.provider import StaticCurrentUser

router = APIRouter(prefix="/handymen", tags=["handymen"])


def _to_response(profile: HandymanProfile) -> HandymanDetailResponse:
    return HandymanDetailResponse(
        data=HandymanResponse(
            id=profile.id or "",
            user_id=profile.user_id,
            email=profile.email,
            name=profile.name,
            experience=profile.experience,
            hourly_rate=profile.hourly_rate,
            skills=list(profile.skills),
            is_available=profile.is_available,
            availability=AvailabilitySchema(
                days=profile.availability.days,
                start_time=profile.availability.start_time,
                end_time=profile.availability.end_time,
            ),
            rating=profile.rating,
            reviews=profile.reviews,
            created_at=profile.created_at,
        )
    )


@router.get(
    "/options",
    response_model=HandymanOptionsResponse,
    summary="List skill and weekday choices",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_options(request: Request) -> HandymanOptionsResponse:
    """Fixed vocabularies for the skills and availability pickers."""
    return HandymanOptionsResponse(**HandymanService.options())


@router.get(
    "/me",
    response_model=HandymanDetailResponse,
    summary="View your handyman profile",
    responses={
        200: {"description": "Profile found"},
        401: {"description": "Not logged in"},
        404: {"description": "No handyman profile found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    user: OptionalUser,
    service: HandymanService = Depends(get_handyman_service),
) -> HandymanDetailResponse:
    """Get the handyman profile bound to the authenticated user."""
    profile = await service.get_profile(StaticCurrentUser(user))
    return _to_response(profile)


@router.patch(
    "/me",
    response_model=HandymanDetailResponse,
    summary="Edit your handyman profile",
    responses={
        200: {"description": "Profile updated successfully"},
        400: {"description": "Missing required fields"},
        401: {"description": "Not logged in"},
        404: {"description": "No handyman profile found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_my_profile(
    request: Request,
    body: HandymanUpdate,
    user: OptionalUser,
    service: HandymanService = Depends(get_handyman_service),
) -> HandymanDetailResponse:
    """Update name, experience, rate, skills, availability flag or schedule."""
    changes = body.model_dump(exclude_unset=True)
    profile = await service.update_profile(StaticCurrentUser(user), changes)
    return _to_response(profile)


@router.post(
    "",
    response_model=HandymanDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up as a handyman",
    responses={
        201: {"description": "Profile created"},
        400: {"description": "Missing required fields"},
        401: {"description": "Not logged in"},
        409: {"description": "Profile already exists"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def sign_up(
    request: Request,
    body: HandymanCreate,
    user: OptionalUser,
    service: HandymanService = Depends(get_handyman_service),
) -> HandymanDetailResponse:
    """Create the authenticated user's handyman profile."""
    fields = body.model_dump(exclude_unset=True)
    profile = await service.signup(StaticCurrentUser(user), fields)
    return _to_response(profile)
