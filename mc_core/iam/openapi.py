from drf_spectacular.extensions import OpenApiAuthenticationExtension


class StaffJWTScheme(OpenApiAuthenticationExtension):
    """Documents CookieOrHeaderJWTAuthentication as one bearer scheme."""
    target_class = "mc_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "BearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Staff access token in `Authorization: Bearer ...` or the mc_access cookie.",
        }
