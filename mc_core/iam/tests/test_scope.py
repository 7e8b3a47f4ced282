import pytest
from django.test import RequestFactory
from rest_framework.exceptions import NotAuthenticated, PermissionDenied, ValidationError
from rest_framework.test import APIClient

from mc_core.iam.models import StaffMembership
from mc_core.iam.scope import MISSING_SCOPE_MSG, NOT_A_MEMBER_MSG, require_principal

pytestmark = pytest.mark.django_db


def _request(user, **headers):
    req = RequestFactory().get("/api/v1/patients/", **headers)
    req.user = user
    return req


def test_sole_membership_is_used_without_header(doctor, facility):
    principal = require_principal(_request(doctor))

    assert principal.user_id == doctor.id
    assert principal.facility_id == facility.id
    assert "DOCTOR" in principal.roles


def test_header_selects_facility(doctor, facility, other_facility):
    StaffMembership.objects.create(user=doctor, facility=other_facility)

    principal = require_principal(_request(doctor, HTTP_X_FACILITY_ID=str(other_facility.id)))
    assert principal.facility_id == other_facility.id


def test_several_memberships_require_header(doctor, other_facility):
    StaffMembership.objects.create(user=doctor, facility=other_facility)

    with pytest.raises(ValidationError) as exc:
        require_principal(_request(doctor))
    assert MISSING_SCOPE_MSG in str(exc.value.detail)


def test_header_for_foreign_facility_is_403(doctor, other_facility):
    with pytest.raises(PermissionDenied) as exc:
        require_principal(_request(doctor, HTTP_X_FACILITY_ID=str(other_facility.id)))
    assert str(exc.value.detail) == NOT_A_MEMBER_MSG


def test_malformed_header_is_400(doctor):
    with pytest.raises(ValidationError):
        require_principal(_request(doctor, HTTP_X_FACILITY_ID="nope"))


def test_anonymous_is_401():
    from django.contrib.auth.models import AnonymousUser

    with pytest.raises(NotAuthenticated):
        require_principal(_request(AnonymousUser()))


def test_me_lists_facilities_and_roles(client_for, doctor, facility):
    r = client_for(doctor).get("/api/v1/me/")

    assert r.status_code == 200, r.data
    assert r.data["roles"] == ["DOCTOR"]
    assert r.data["facilities"] == [
        {"facility_id": str(facility.id), "facility_code": "main", "facility_name": "Main Hospital"}
    ]
    assert r.data["active_facility_id"] == str(facility.id)


def test_login_sets_cookies_and_cookie_authenticates(doctor):
    c = APIClient()

    login = c.post("/api/v1/auth/login/", {"username": "dr_abebe", "password": "pass12345"}, format="json")
    assert login.status_code == 200, login.data
    assert "mc_access" in login.cookies
    assert "mc_refresh" in login.cookies

    # APIClient keeps cookies between requests
    me = c.get("/api/v1/me/")
    assert me.status_code == 200, me.data
    assert me.data["user"]["username"] == "dr_abebe"


def test_bad_login_is_401():
    r = APIClient().post("/api/v1/auth/login/", {"username": "ghost", "password": "nope"}, format="json")
    assert r.status_code == 401
    assert r.data["error"]["code"] == "authentication_failed"
