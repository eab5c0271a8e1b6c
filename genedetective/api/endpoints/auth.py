"""Endpoints d'inscription, de connexion et de compte courant."""

from fastapi import APIRouter, Depends, Response, status

from genedetective.core.data_access import DataAccess, get_data_access
from genedetective.core.exceptions import NotFoundError
from genedetective.core.security import CurrentUser, get_current_user
from genedetective.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    UserProfile,
    UserSummary,
)
from genedetective.services import user_service

router = APIRouter()


def _auth_response(message: str, user: CurrentUser, token: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=token,
        user=UserSummary(
            id=user.id, full_name=user.full_name, email=user.email, user_role=user.role
        ),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Inscrire un utilisateur",
)
async def register(
    payload: RegisterRequest,
    dal: DataAccess = Depends(get_data_access),
) -> AuthResponse:
    user, token = await user_service.register_user(dal, payload)
    return _auth_response("User registered successfully", user, token)


@router.post("/login", response_model=AuthResponse, summary="Se connecter")
async def login(
    payload: LoginRequest,
    dal: DataAccess = Depends(get_data_access),
) -> AuthResponse:
    user, token = await user_service.authenticate(dal, payload.email, payload.password)
    return _auth_response("Login successful", user, token)


@router.get("/profile", response_model=ProfileResponse, summary="Profil courant")
async def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    dal: DataAccess = Depends(get_data_access),
) -> ProfileResponse:
    profile = await user_service.get_profile(dal, current_user)
    return ProfileResponse(user=UserProfile.model_validate(profile))


@router.delete(
    "/account",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Supprimer son compte",
    description="Supprime le compte courant et tous les enregistrements qui en dépendent",
)
async def delete_account(
    current_user: CurrentUser = Depends(get_current_user),
    dal: DataAccess = Depends(get_data_access),
) -> Response:
    if not await user_service.delete_user(dal, current_user.id):
        raise NotFoundError("User not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
