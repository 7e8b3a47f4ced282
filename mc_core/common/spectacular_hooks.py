# mc_core/common/spectacular_hooks.py
from __future__ import annotations

VERSIONED_PREFIX = "/api/v1/"


def preprocess_exclude_legacy_api(endpoints):
    """
    The API is mounted at /api/v1/ and again at the bare /api/ alias.
    Only the versioned copy goes into the schema.
    """
    return [
        endpoint
        for endpoint in endpoints
        if endpoint[0].startswith(VERSIONED_PREFIX) or not endpoint[0].startswith("/api/")
    ]
