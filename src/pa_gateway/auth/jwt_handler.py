"""JWT verification.

Tokens are minted by the external identity provider with a shared HS256
secret; this service never issues them. The `sub` claim is the user id and
matches `profiles.id`.
"""

from jose import JWTError, jwt

from config.settings import settings
from src.pa_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate a bearer token.

    Raises:
        InvalidCredentialsError: signature invalid, token expired, or no `sub`.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
            options={"verify_aud": False},
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if not payload.get("sub"):
        raise InvalidCredentialsError()
    return payload
