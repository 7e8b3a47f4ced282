# mc_core/iam/api/auth.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer

from mc_core.iam.api.schema_serializers import (
    LoginRequestSerializer,
    LoginResponseSerializer,
    LogoutResponseSerializer,
    RefreshResponseSerializer,
)


@dataclass(frozen=True)
class AuthCookieConfig:
    access_name: str
    refresh_name: str
    access_max_age: int
    refresh_max_age: int
    secure: bool
    samesite: str

    @classmethod
    def from_settings(cls) -> "AuthCookieConfig":
        jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
        access_lifetime = jwt_cfg.get("ACCESS_TOKEN_LIFETIME", timedelta(minutes=10))
        refresh_lifetime = jwt_cfg.get("REFRESH_TOKEN_LIFETIME", timedelta(days=14))
        return cls(
            access_name=jwt_cfg.get("AUTH_COOKIE", "mc_access"),
            refresh_name=jwt_cfg.get("AUTH_COOKIE_REFRESH", "mc_refresh"),
            access_max_age=int(access_lifetime.total_seconds()),
            refresh_max_age=int(refresh_lifetime.total_seconds()),
            secure=bool(jwt_cfg.get("AUTH_COOKIE_SECURE", False)),
            samesite=jwt_cfg.get("AUTH_COOKIE_SAMESITE", "Lax"),
        )

    def write(self, response: Response, *, access: str, refresh: str) -> None:
        for name, value, max_age in (
            (self.access_name, access, self.access_max_age),
            (self.refresh_name, refresh, self.refresh_max_age),
        ):
            response.set_cookie(
                name,
                value,
                max_age=max_age,
                httponly=True,
                secure=self.secure,
                samesite=self.samesite,
                path="/",
            )

    def clear(self, response: Response) -> None:
        response.delete_cookie(self.access_name, path="/")
        response.delete_cookie(self.refresh_name, path="/")


class LoginView(APIView):
    """Staff login: issues access/refresh JWTs as HttpOnly cookies."""
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def get_authenticate_header(self, request):
        # Bad credentials stay 401 even though this view runs no authenticators
        return 'Bearer realm="api"'

    @extend_schema(request=LoginRequestSerializer, responses={200: LoginResponseSerializer}, tags=["IAM"])
    def post(self, request):
        serializer = TokenObtainPairSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        res = Response({"detail": "login ok"}, status=status.HTTP_200_OK)
        AuthCookieConfig.from_settings().write(
            res,
            access=serializer.validated_data["access"],
            refresh=serializer.validated_data["refresh"],
        )
        return res


class RefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(request=None, responses={200: RefreshResponseSerializer}, tags=["IAM"])
    def post(self, request):
        cookies = AuthCookieConfig.from_settings()
        refresh = request.COOKIES.get(cookies.refresh_name)
        if not refresh:
            raise NotAuthenticated("Refresh cookie missing.")

        serializer = TokenRefreshSerializer(data={"refresh": refresh})
        serializer.is_valid(raise_exception=True)

        res = Response({"detail": "refreshed"}, status=status.HTTP_200_OK)
        cookies.write(
            res,
            access=serializer.validated_data["access"],
            refresh=serializer.validated_data.get("refresh", refresh),
        )
        return res


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: LogoutResponseSerializer}, tags=["IAM"])
    def post(self, request):
        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        AuthCookieConfig.from_settings().clear(res)
        return res
