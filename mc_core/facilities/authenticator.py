# mc_core/facilities/authenticator.py
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from uuid import UUID

from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from mc_core.facilities.models import FacilityCredential

logger = logging.getLogger(__name__)

MISSING_KEY_MSG = "API key is required."
INVALID_KEY_MSG = "Invalid API key or facility not approved."


@dataclass(frozen=True)
class FacilityContext:
    """
    Resolved identity of an authenticated facility.
    Passed explicitly into every central-history write.
    """
    facility_id: UUID
    facility_code: str
    facility_name: str

    # DRF stores the authenticated identity on request.user
    is_authenticated = True


def digest_key(raw_key: str) -> str:
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()


class FacilityAuthenticator:
    @staticmethod
    def resolve(secret_key: str | None) -> FacilityContext:
        """
        - no key            -> NotAuthenticated
        - unknown key       -> PermissionDenied
        - unapproved key    -> PermissionDenied (same message)
        Lookup only, no side effects.
        """
        key = (secret_key or "").strip()
        if not key:
            raise NotAuthenticated(MISSING_KEY_MSG)

        credential = (
            FacilityCredential.objects.select_related("facility")
            .filter(key_digest=digest_key(key))
            .first()
        )

        if credential is None or not credential.is_approved or not credential.facility.is_active:
            logger.warning("Rejected facility key with prefix %s", key[:8])
            raise PermissionDenied(INVALID_KEY_MSG)

        facility = credential.facility
        return FacilityContext(
            facility_id=facility.id,
            facility_code=facility.code,
            facility_name=facility.name,
        )
