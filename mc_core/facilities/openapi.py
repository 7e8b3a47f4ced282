from drf_spectacular.extensions import OpenApiAuthenticationExtension


class FacilityKeyAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "mc_core.facilities.auth.FacilityKeyAuthentication"
    name = "FacilityApiKey"

    def get_security_definition(self, auto_schema):
        return {
            "type": "apiKey",
            "in": "header",
            "name": "X-Api-Key",
            "description": "Facility secret key issued at onboarding (must be approved).",
        }
