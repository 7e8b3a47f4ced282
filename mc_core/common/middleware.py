from __future__ import annotations

import re

from django.utils.deprecation import MiddlewareMixin

from mc_core.common.api.exceptions import ensure_request_id


class RequestIdMiddleware(MiddlewareMixin):
    """
    Attaches a request_id to every request and echoes it back as X-Request-Id.

    - A well-formed inbound X-Request-Id (from a gateway) is reused.
    - Otherwise a fresh uuid4 hex is generated.
    The same id appears in error envelopes and server logs.
    """

    HEADER_META_KEY = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-Id"
    _VALID = re.compile(r"^[A-Za-z0-9\-_.]{8,128}$")

    def process_request(self, request):
        inbound = request.META.get(self.HEADER_META_KEY, "")
        if inbound and self._VALID.match(inbound):
            request.request_id = inbound
        ensure_request_id(request)
        return None

    def process_response(self, request, response):
        rid = getattr(request, "request_id", None)
        if rid:
            response[self.RESPONSE_HEADER] = rid
        return response
