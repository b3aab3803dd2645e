"""Custom validators and sanitizers"""

import os
import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Union
from email_validator import validate_email, EmailNotValidError

from app.core.config import settings
from app.core.exceptions import ValidationException, ImageTooLargeException

# Indian mobile numbers: 10 digits, leading 6-9
PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")

# Prices are stored to two decimal places
PRICE_QUANTUM = Decimal("0.01")

# Ratings are whole stars
MIN_RATING = 1
MAX_RATING = 5

def clean_phone(phone: str) -> str:
    """Strip everything but digits"""
    return re.sub(r"\D", "", phone or "")

def validate_phone(phone: str) -> str:
    """
    Validate a 10-digit mobile number

    Args:
        phone: Raw phone input

    Returns:
        Digits-only phone number

    Raises:
        ValidationException: If the number is not 10 digits or starts with 0-5
    """
    cleaned = clean_phone(phone)

    if len(cleaned) != 10:
        raise ValidationException("Phone number must be exactly 10 digits", "INVALID_PHONE")

    if not PHONE_PATTERN.match(cleaned):
        raise ValidationException("Phone number must start with 6, 7, 8, or 9", "INVALID_PHONE")

    return cleaned

def is_valid_phone(phone: Optional[str]) -> bool:
    """Check a stored phone number without raising"""
    return bool(phone) and bool(PHONE_PATTERN.match(phone))

def validate_name(name: str) -> str:
    """Validate a display name"""
    name = normalize_text(name or "")
    if len(name) < settings.NAME_MIN_LENGTH:
        raise ValidationException(
            f"Name must be at least {settings.NAME_MIN_LENGTH} characters",
            "INVALID_NAME"
        )
    return name

def validate_email_address(email: str) -> str:
    """Validate and normalize email"""
    email = (email or "").strip().lower()
    if not email:
        raise ValidationException("Please enter your email address", "INVALID_EMAIL")

    try:
        validation = validate_email(email, check_deliverability=False)
        return validation.normalized
    except EmailNotValidError as e:
        raise ValidationException(str(e), "INVALID_EMAIL")

def validate_password(password: str) -> str:
    """Validate password length"""
    if len(password or "") < settings.PASSWORD_MIN_LENGTH:
        raise ValidationException(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters",
            "INVALID_PASSWORD"
        )
    return password

def validate_new_password(password: str, confirm_password: str) -> str:
    """Validate a new password and its confirmation"""
    if password != confirm_password:
        raise ValidationException("Passwords do not match", "PASSWORD_MISMATCH")
    return validate_password(password)

def validate_price(price: Union[str, int, float, Decimal, None]) -> Decimal:
    """Parse a price and require it to be positive"""
    if price is None or str(price).strip() == "":
        raise ValidationException("Please fill all fields", "MISSING_FIELDS")

    try:
        value = Decimal(str(price).strip())
    except InvalidOperation:
        raise ValidationException("Price must be a number", "INVALID_PRICE")

    if not value.is_finite():
        raise ValidationException("Price must be a number", "INVALID_PRICE")

    # Positivity is checked on the stored (paise) value
    try:
        value = value.quantize(PRICE_QUANTUM)
    except InvalidOperation:
        raise ValidationException("Price is too large", "INVALID_PRICE")

    if value <= 0:
        raise ValidationException("Price must be greater than 0", "INVALID_PRICE")

    return value

def validate_product_name(name: Optional[str]) -> str:
    """Product names only need to be non-empty"""
    name = normalize_text(name or "")
    if not name:
        raise ValidationException("Please fill all fields", "MISSING_FIELDS")
    return name

def validate_image_upload(filename: str, size: int) -> str:
    """
    Validate an image before it is uploaded

    Args:
        filename: Original file name
        size: Size in bytes

    Returns:
        Lower-cased file extension including the dot
    """
    if size > settings.MAX_IMAGE_SIZE:
        raise ImageTooLargeException()

    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in settings.ALLOWED_IMAGE_EXTENSIONS:
        raise ValidationException(
            f"Unsupported image type. Allowed: {', '.join(settings.ALLOWED_IMAGE_EXTENSIONS)}",
            "INVALID_IMAGE"
        )

    return ext

def validate_rating(rating: int) -> int:
    """Ratings are whole stars from 1 to 5"""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationException("Rating must be a whole number", "INVALID_RATING")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationException(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}",
            "INVALID_RATING"
        )
    return rating

def normalize_text(text: str) -> str:
    """Normalize text input"""
    # Remove extra whitespace
    text = " ".join(text.split())

    # Remove zero-width characters
    text = re.sub(r'[\u200b\u200c\u200d\ufeff]', '', text)

    return text.strip()

def normalize_comment(comment: Optional[str]) -> Optional[str]:
    """Blank review comments are stored as null"""
    if comment is None:
        return None
    comment = comment.strip()
    return comment or None
