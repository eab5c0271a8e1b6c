"""Schémas Pydantic pour l'inscription, la connexion et le profil."""

from datetime import date

from pydantic import Field, field_validator

from genedetective.models import Role
from genedetective.schemas.utils import CamelModel, Email, FullName, Password


class RegisterRequest(CamelModel):
    full_name: FullName
    email: Email
    password: Password
    date_of_birth: date | None = Field(None, description="Date de naissance")
    user_role: Role = Field(
        default=Role.PATIENT, description="1=Patient, 2=Counselor, 4=Researcher"
    )

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: date | None) -> date | None:
        if v is not None and v > date.today():
            raise ValueError("La date de naissance ne peut pas être dans le futur")
        return v


class LoginRequest(CamelModel):
    email: Email
    password: Password


class UserSummary(CamelModel):
    id: int
    full_name: str
    email: str
    user_role: Role


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserSummary


class UserProfile(CamelModel):
    """Profil courant avec les champs propres au rôle (absents sinon)."""

    id: int
    full_name: str
    email: str
    user_role: Role
    date_birth: date | None = None
    medical_history: str | None = None
    specialization: str | None = None
    institution: str | None = None
    research_area: str | None = None


class ProfileResponse(CamelModel):
    user: UserProfile
