# mc_core/facilities/services.py
from __future__ import annotations

import secrets
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from mc_core.facilities.authenticator import digest_key
from mc_core.facilities.models import Facility, FacilityCredential


class FacilityCredentialService:
    """
    Issuance/approval helpers for onboarding tooling.
    The raw key is returned exactly once, from issue().
    """

    @staticmethod
    @transaction.atomic
    def issue(*, facility_id: UUID, approved: bool = False) -> tuple[FacilityCredential, str]:
        facility = Facility.objects.get(id=facility_id)
        raw_key = secrets.token_urlsafe(32)

        credential = FacilityCredential.objects.create(
            facility=facility,
            key_digest=digest_key(raw_key),
            key_prefix=raw_key[:8],
            is_approved=approved,
            approved_at=timezone.now() if approved else None,
        )
        return credential, raw_key

    @staticmethod
    @transaction.atomic
    def set_approval(*, credential_id: UUID, approved: bool) -> FacilityCredential:
        credential = FacilityCredential.objects.select_for_update().get(id=credential_id)
        if credential.is_approved == approved:
            return credential

        credential.is_approved = approved
        credential.approved_at = timezone.now() if approved else None
        credential.save(update_fields=["is_approved", "approved_at", "updated_at"])
        return credential
