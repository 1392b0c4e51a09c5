from rest_framework_simplejwt.tokens import AccessToken


class RoleAccessToken(AccessToken):
    """Access token that carries the holder's email and current role only."""

    @classmethod
    def for_user(cls, user):
        """Create an access token whose subject claim is the user's email."""
        token = super().for_user(user)
        token["role"] = user.role
        return token
