# backend/routers/users_router.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database.session import get_db
from models.user_model import User
from schemas.users import (
    IdentifierCheckPayload, IdentifierCheckResponse,
    EmailCheckPayload, EmailAvailability, EmailResetCheck,
)
from services.errors import ClientError, InternalError
from services.phone_numbers import is_email, is_valid_phone_number, format_phone_number

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


def _find_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def _find_by_phone(db: Session, phone: str):
    return db.query(User).filter(or_(User.phone == phone, User.whatsapp == phone)).first()


@router.post("/identifier/check", response_model=IdentifierCheckResponse)
def check_identifier(body: IdentifierCheckPayload, db: Session = Depends(get_db)):
    """Does an account exist for this email or phone number?"""
    identifier = (body.identifier or "").strip()
    if not identifier:
        raise ClientError("Email or phone number is required")

    try:
        if is_email(identifier):
            user = _find_by_email(db, identifier)
        elif is_valid_phone_number(identifier):
            user = _find_by_phone(db, format_phone_number(identifier))
        else:
            raise ClientError("Invalid format. Please enter a valid email or phone number.")
    except ClientError:
        raise
    except Exception as e:
        logger.error(f"Error checking identifier: {e}")
        raise InternalError()

    return IdentifierCheckResponse(exists=user is not None)


@router.post("/email/check")
def check_email(body: EmailCheckPayload, db: Session = Depends(get_db)):
    if not body.email:
        raise ClientError("Email is required")

    try:
        user = _find_by_email(db, str(body.email))
    except Exception as e:
        logger.error(f"Error checking email availability: {e}")
        raise InternalError()

    if body.action == "reset":
        # password reset needs a phone or WhatsApp number to send the code to
        if not user:
            return EmailResetCheck(exists=False, hasContactInfo=False, message="Email not found")
        has_contact_info = bool(user.whatsapp or user.phone)
        return EmailResetCheck(
            exists=True,
            hasContactInfo=has_contact_info,
            message="Email verified" if has_contact_info
            else "This account doesn't have a phone number for verification",
        )

    # "register" and anything else
    if user:
        return EmailAvailability(available=False, message="Email already in use")
    return EmailAvailability(available=True).model_dump(exclude_none=True)
