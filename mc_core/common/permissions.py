# mc_core/common/permissions.py

from __future__ import annotations

from typing import Set

from rest_framework.permissions import BasePermission, SAFE_METHODS

# Group/role names (Django auth Group names)
ROLE_ADMIN = "ADMIN"
ROLE_DOCTOR = "DOCTOR"
ROLE_NURSE = "NURSE"
ROLE_RECEPTION = "RECEPTION"

ALL_ROLES = (ROLE_ADMIN, ROLE_DOCTOR, ROLE_NURSE, ROLE_RECEPTION)


def user_roles(user) -> Set[str]:
    """
    Resolve roles from Django groups (user.groups).
    Superusers are treated as ADMIN.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    if getattr(user, "is_superuser", False):
        roles.add(ROLE_ADMIN)
        return roles

    if hasattr(user, "groups"):
        roles.update(user.groups.values_list("name", flat=True))

    return roles


class BaseRolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    Key behavior:
    - Requires an authenticated staff user.
    - ADMIN passes the role check (record-level access is still decided by the
      access guard, roles never grant access to a specific encounter).
    - Uses allowed_roles_per_action for strict RBAC.
    - If action is unknown and request is SAFE, fall back to list/retrieve.
    """
    message = "You do not have permission to perform this action."

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action: dict[str, set[str]] = {}

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        roles = user_roles(user)

        if ROLE_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            allowed = self.allowed_roles_per_action.get("retrieve" if is_detail else "list")

        if allowed is not None:
            return bool(roles & allowed)

        # Unknown action => deny by default
        return False


class PatientPermission(BaseRolePermission):
    """Facility-local patient registry."""
    allowed_roles_per_action = {
        "list": {ROLE_DOCTOR, ROLE_NURSE, ROLE_RECEPTION},
        "create": {ROLE_NURSE, ROLE_RECEPTION},
    }


class EncounterPermission(BaseRolePermission):
    """
    Intake, triage and assignment belong to front-desk/nursing staff.
    Clinical reads and writes belong to doctors (and are further narrowed
    to the assigned doctor by the access guard).
    """
    allowed_roles_per_action = {
        "create": {ROLE_NURSE, ROLE_RECEPTION},
        "triage": {ROLE_NURSE},
        "assign": {ROLE_NURSE, ROLE_RECEPTION},
        "retrieve": {ROLE_DOCTOR},
        "start_treatment": {ROLE_DOCTOR},
        "complete": {ROLE_DOCTOR},
        "lab_requests": {ROLE_DOCTOR},
        "prescriptions": {ROLE_DOCTOR},
    }


class DoctorPatientPermission(BaseRolePermission):
    """Doctor-scoped patient list / profile / history."""
    allowed_roles_per_action = {
        "list": {ROLE_DOCTOR},
        "retrieve": {ROLE_DOCTOR},
        "history": {ROLE_DOCTOR},
    }
