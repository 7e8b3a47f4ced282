import pytest
from rest_framework.exceptions import NotAuthenticated, PermissionDenied
from rest_framework.test import APIClient

from mc_core.facilities.authenticator import (
    INVALID_KEY_MSG,
    MISSING_KEY_MSG,
    FacilityAuthenticator,
    FacilityContext,
)
from mc_core.facilities.models import FacilityCredential
from mc_core.facilities.services import FacilityCredentialService

pytestmark = pytest.mark.django_db


def test_resolve_approved_key_returns_facility_context(facility, approved_key):
    ctx = FacilityAuthenticator.resolve(approved_key)

    assert isinstance(ctx, FacilityContext)
    assert ctx.facility_id == facility.id
    assert ctx.facility_code == "main"
    assert ctx.facility_name == "Main Hospital"


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_resolve_without_key_is_unauthenticated(raw):
    with pytest.raises(NotAuthenticated) as exc:
        FacilityAuthenticator.resolve(raw)
    assert str(exc.value.detail) == MISSING_KEY_MSG


def test_unknown_and_unapproved_keys_get_the_same_denial(unapproved_key):
    with pytest.raises(PermissionDenied) as unknown:
        FacilityAuthenticator.resolve("definitely-not-a-key")
    with pytest.raises(PermissionDenied) as unapproved:
        FacilityAuthenticator.resolve(unapproved_key)

    assert str(unknown.value.detail) == INVALID_KEY_MSG
    assert str(unapproved.value.detail) == str(unknown.value.detail)


def test_only_digest_is_stored(facility):
    credential, raw_key = FacilityCredentialService.issue(facility_id=facility.id, approved=True)

    stored = FacilityCredential.objects.get(id=credential.id)
    assert stored.key_digest != raw_key
    assert len(stored.key_digest) == 64
    assert raw_key.startswith(stored.key_prefix)


def test_set_approval_toggles_access(facility):
    credential, raw_key = FacilityCredentialService.issue(facility_id=facility.id)

    FacilityCredentialService.set_approval(credential_id=credential.id, approved=True)
    assert FacilityAuthenticator.resolve(raw_key).facility_id == facility.id

    FacilityCredentialService.set_approval(credential_id=credential.id, approved=False)
    with pytest.raises(PermissionDenied):
        FacilityAuthenticator.resolve(raw_key)


def test_inactive_facility_is_denied(facility, approved_key):
    facility.is_active = False
    facility.save(update_fields=["is_active"])

    with pytest.raises(PermissionDenied):
        FacilityAuthenticator.resolve(approved_key)


# ---------------------------------------------------------------------------
# HTTP behaviour on the central submit endpoint
# ---------------------------------------------------------------------------

URL = "/api/v1/central/records/"


def test_missing_key_is_401_with_envelope():
    r = APIClient().post(URL, {}, format="json")

    assert r.status_code == 401
    assert r.data["error"]["code"] == "not_authenticated"
    assert r.data["error"]["message"] == MISSING_KEY_MSG


def test_bad_key_is_403_with_envelope():
    r = APIClient().post(URL, {}, format="json", HTTP_X_API_KEY="nope")

    assert r.status_code == 403
    assert r.data["error"]["code"] == "permission_denied"
    assert r.data["error"]["message"] == INVALID_KEY_MSG


def test_unapproved_key_is_403(unapproved_key):
    r = APIClient().post(URL, {}, format="json", HTTP_X_API_KEY=unapproved_key)
    assert r.status_code == 403


def test_key_accepted_from_query_param(approved_key):
    # Empty body passes auth and fails validation instead
    r = APIClient().post(f"{URL}?apiKey={approved_key}", {}, format="json")

    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"
