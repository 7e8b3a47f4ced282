# mc_core/iam/scope.py
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from rest_framework.exceptions import NotAuthenticated, PermissionDenied, ValidationError

from mc_core.common.permissions import user_roles
from mc_core.iam.services.membership import active_facility_ids, is_user_member_of_facility


@dataclass(frozen=True)
class StaffPrincipal:
    """
    Authenticated staff identity + the facility it is acting in.
    Built once per request and passed explicitly to every core operation.
    """
    user_id: int
    facility_id: UUID
    roles: frozenset[str] = frozenset()


HDR_FACILITY = "X-Facility-Id"

MISSING_SCOPE_MSG = "Missing scope header. Provide X-Facility-Id."
INVALID_SCOPE_MSG = "Invalid scope header. Provide a valid UUID for X-Facility-Id."
NOT_A_MEMBER_MSG = "You do not have access to the selected facility."


def _get_header(request, name: str) -> str | None:
    try:
        return request.headers.get(name)
    except Exception:
        return None


def _parse_facility_id(raw: str) -> UUID:
    try:
        return UUID(str(raw))
    except (TypeError, ValueError):
        raise ValidationError({HDR_FACILITY: INVALID_SCOPE_MSG})


def resolve_facility_scope(request, user) -> UUID | None:
    """
    Facility the user is acting in:
      - X-Facility-Id header if present (must be an active membership -> 403 otherwise)
      - else the user's only active membership
      - else None (caller decides)
    """
    raw = _get_header(request, HDR_FACILITY)
    if raw:
        facility_id = _parse_facility_id(raw)
        if not is_user_member_of_facility(user_id=user.id, facility_id=facility_id):
            raise PermissionDenied(NOT_A_MEMBER_MSG)
        return facility_id

    facility_ids = active_facility_ids(user.id)
    if len(facility_ids) == 1:
        return facility_ids[0]
    return None


def apply_scope_from_headers(request, user=None) -> UUID | None:
    """
    Used by the auth layer. Sets request.facility_id when a scope can be
    resolved; leaves it unset otherwise.
    """
    u = user or getattr(request, "user", None)
    facility_id = resolve_facility_scope(request, u)
    if facility_id is not None:
        request.facility_id = facility_id
    return facility_id


def require_principal(request) -> StaffPrincipal:
    """
    Build the StaffPrincipal for a staff request or fail:
      - unauthenticated -> 401
      - no resolvable facility -> 400
      - not a member of the requested facility -> 403
    """
    user = getattr(request, "user", None)
    if not user or not getattr(user, "is_authenticated", False) or not getattr(user, "id", None):
        raise NotAuthenticated()

    facility_id = getattr(request, "facility_id", None)
    if facility_id is None:
        facility_id = apply_scope_from_headers(request, user=user)
    if facility_id is None:
        raise ValidationError(MISSING_SCOPE_MSG)

    return StaffPrincipal(
        user_id=user.id,
        facility_id=facility_id,
        roles=frozenset(user_roles(user)),
    )
