# mc_core/encounters/lifecycle.py
from __future__ import annotations

import enum
import logging
from uuid import UUID

from django.utils import timezone

from mc_core.common.api.exceptions import InvalidTransition
from mc_core.common.ids import coerce_uuid
from mc_core.encounters.models import Encounter, EncounterStatus

logger = logging.getLogger(__name__)


class EncounterAction(str, enum.Enum):
    ASSIGN = "assign"
    START_TREATMENT = "start_treatment"
    COMPLETE = "complete"


# (from_status, action) -> to_status. Anything not listed is rejected.
TRANSITIONS: dict[tuple[str, EncounterAction], str] = {
    (EncounterStatus.PENDING, EncounterAction.ASSIGN): EncounterStatus.ASSIGNED,
    (EncounterStatus.ASSIGNED, EncounterAction.START_TREATMENT): EncounterStatus.IN_TREATMENT,
    (EncounterStatus.IN_TREATMENT, EncounterAction.COMPLETE): EncounterStatus.COMPLETED,
}

# Actions only the assigned doctor may perform
DOCTOR_ACTIONS = frozenset({EncounterAction.START_TREATMENT, EncounterAction.COMPLETE})

# Status stamp written alongside each transition
_TIMESTAMP_FIELD = {
    EncounterAction.ASSIGN: "assigned_at",
    EncounterAction.START_TREATMENT: "treatment_started_at",
    EncounterAction.COMPLETE: "completed_at",
}


def next_status(current: str, action: EncounterAction) -> str:
    try:
        return TRANSITIONS[(current, action)]
    except KeyError:
        raise InvalidTransition()


def source_status(action: EncounterAction) -> str:
    """
    The single status an action may be applied from.
    """
    for (from_status, candidate), _ in TRANSITIONS.items():
        if candidate == action:
            return from_status
    raise InvalidTransition()


def allowed_actions(current: str) -> list[EncounterAction]:
    return [action for (from_status, action) in TRANSITIONS if from_status == current]


def is_terminal(current: str) -> bool:
    return not allowed_actions(current)


def apply_transition(
    *,
    facility_id: UUID,
    encounter_id,
    action: EncounterAction,
    doctor_id: int | None = None,
    changes: dict | None = None,
) -> Encounter:
    """
    Check-and-set transition:

        UPDATE encounter SET status=<to>, ...
        WHERE id=<id> AND facility_id=<f> AND status=<from> [AND assigned_doctor=<doctor>]

    Zero rows updated means the record is missing, belongs to someone else, or is
    in the wrong status; all three surface as the same InvalidTransition.
    """
    enc_id = coerce_uuid(encounter_id)
    if enc_id is None:
        raise InvalidTransition()

    if action in DOCTOR_ACTIONS and doctor_id is None:
        raise InvalidTransition()

    from_status = source_status(action)
    to_status = next_status(from_status, action)

    qs = Encounter.objects.filter(id=enc_id, facility_id=facility_id, status=from_status)
    if doctor_id is not None:
        qs = qs.filter(assigned_doctor_id=doctor_id)

    now = timezone.now()
    values = dict(changes or {})
    values.update({"status": to_status, _TIMESTAMP_FIELD[action]: now, "updated_at": now})

    updated = qs.update(**values)
    if updated != 1:
        logger.info(
            "Rejected %s on encounter %s (facility=%s, doctor=%s)",
            action.value,
            enc_id,
            facility_id,
            doctor_id,
        )
        raise InvalidTransition()

    logger.info("Encounter %s: %s -> %s", enc_id, from_status, to_status)
    return Encounter.objects.get(id=enc_id)
