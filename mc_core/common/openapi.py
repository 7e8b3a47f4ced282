# mc_core/common/openapi.py
from __future__ import annotations

from drf_spectacular.openapi import AutoSchema
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter


class MediConnectAutoSchema(AutoSchema):
    """
    Global OpenAPI improvements:

    - Adds the X-Facility-Id scope header to staff endpoints
    - Skips it for auth endpoints, the central history API (facility key auth)
      and schema/docs endpoints
    """

    FACILITY_HEADER = OpenApiParameter(
        name="X-Facility-Id",
        type=OpenApiTypes.UUID,
        location=OpenApiParameter.HEADER,
        required=False,
        description=(
            "Facility scope UUID. Optional when the user belongs to exactly one facility."
        ),
    )

    UNSCOPED_MODULE_PREFIXES = (
        "mc_core.iam.api.",
        "mc_core.central_history.api.",
    )

    def _is_unscoped_endpoint(self) -> bool:
        view = getattr(self, "view", None)
        if view is None:
            return False

        if view.__class__.__name__ in {"SpectacularAPIView", "SpectacularSwaggerView"}:
            return True

        module = view.__class__.__module__ or ""
        return module.startswith(self.UNSCOPED_MODULE_PREFIXES)

    def get_override_parameters(self):
        params = list(super().get_override_parameters() or [])

        if not self._is_unscoped_endpoint():
            existing = {p.name.lower() for p in params}
            if self.FACILITY_HEADER.name.lower() not in existing:
                params.append(self.FACILITY_HEADER)

        return params
