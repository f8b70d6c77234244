"""
badddy.api.routers.email

Transactional email endpoints.

Responsibilities:
- Validate email requests (unknown fields rejected).
- Delegate delivery to `EmailService`.

Verification and reset-password are public: the requester is not signed in
yet (signing up, or locked out). `send` and `welcome` require a bearer token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, EmailStr, Field

from badddy.api.deps import email_service
from badddy.auth.guard import public
from badddy.email.service import EmailService

router = APIRouter(prefix="/email", tags=["email"])


class _EmailRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class SendEmailRequest(_EmailRequest):
    to: EmailStr
    subject: str = Field(min_length=1, max_length=998)
    html: str = Field(min_length=1)
    text: str | None = None


class SendVerificationEmailRequest(_EmailRequest):
    to: EmailStr
    user_name: str = Field(alias="userName", min_length=1, max_length=256)
    verification_url: AnyHttpUrl = Field(alias="verificationUrl")


class SendResetPasswordEmailRequest(_EmailRequest):
    to: EmailStr
    user_name: str = Field(alias="userName", min_length=1, max_length=256)
    reset_url: AnyHttpUrl = Field(alias="resetUrl")


class SendWelcomeEmailRequest(_EmailRequest):
    to: EmailStr
    user_name: str = Field(alias="userName", min_length=1, max_length=256)


class MessageResponse(BaseModel):
    message: str


@router.post("/send", response_model=MessageResponse)
async def send_email(
    body: SendEmailRequest,
    emails: EmailService = Depends(email_service),
) -> MessageResponse:
    await emails.send_email(body.to, body.subject, body.html, body.text)
    return MessageResponse(message="Email sent successfully")


@router.post("/verification", response_model=MessageResponse)
@public
async def send_verification_email(
    body: SendVerificationEmailRequest,
    emails: EmailService = Depends(email_service),
) -> MessageResponse:
    await emails.send_verification_email(body.to, body.user_name, str(body.verification_url))
    return MessageResponse(message="Verification email sent successfully")


@router.post("/reset-password", response_model=MessageResponse)
@public
async def send_reset_password_email(
    body: SendResetPasswordEmailRequest,
    emails: EmailService = Depends(email_service),
) -> MessageResponse:
    await emails.send_reset_password_email(body.to, body.user_name, str(body.reset_url))
    return MessageResponse(message="Reset password email sent successfully")


@router.post("/welcome", response_model=MessageResponse)
async def send_welcome_email(
    body: SendWelcomeEmailRequest,
    emails: EmailService = Depends(email_service),
) -> MessageResponse:
    await emails.send_welcome_email(body.to, body.user_name)
    return MessageResponse(message="Welcome email sent successfully")


# --- Module Notes -----------------------------------------------------------
# Routes answer 200 (not 201): nothing is created on this service.
