"""
backend/kupon/errors.py

Purpose:
    Domain error taxonomy for the coupon lifecycle. Every kind is an expected,
    user-correctable condition except ProviderUnavailable, which marks a
    failing external match/result feed. The HTTP layer maps them via
    `status_code` and `code`; services never raise HTTPException directly.
"""

from fastapi import status


class KuponError(Exception):
    """Base class for all domain errors surfaced to the caller."""

    code = "kupon_error"
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Request could not be processed."

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class NoMatchesPublished(KuponError):
    code = "no_matches_published"
    detail = "No matches for today."


class CouponLocked(KuponError):
    code = "coupon_locked"
    detail = "Coupon already locked."


class AlreadyLocked(KuponError):
    code = "already_locked"
    detail = "Already locked."


class NoValidItems(KuponError):
    code = "no_valid_items"
    detail = "No valid items."


class NoCoupon(KuponError):
    code = "no_coupon"
    status_code = status.HTTP_404_NOT_FOUND
    detail = "No coupon for today."


class NotLocked(KuponError):
    code = "not_locked"
    detail = "Coupon must be locked first."


class MissingCredential(KuponError):
    code = "missing_credential"
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "No token."


class InvalidCredential(KuponError):
    code = "invalid_credential"
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid token."


class UserNotFound(KuponError):
    code = "user_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    detail = "User not found."


class ProviderUnavailable(KuponError):
    code = "provider_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Match data provider unavailable."


class NameRequired(KuponError):
    code = "name_required"
    detail = "Name required."
