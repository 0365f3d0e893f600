# coaching_api/services/token_service.py
from coaching_api.core.errors import MalformedTokenError
from coaching_api.core.security import TokenHandler
from coaching_api.models import User
from coaching_api.schemas.auth import CallerContext, TokenData
from coaching_api.schemas.enums import UserRole


class TokenService:
    """Issues and validates bearer tokens; holds no state between calls"""

    @staticmethod
    def issue(account: User, surface: str = "login") -> str:
        role = account.role if isinstance(account.role, UserRole) else UserRole(account.role)
        return TokenHandler.create_token(
            {"sub": str(account.id), "role": role.value, "email": account.email},
            surface=surface
        )

    @staticmethod
    def validate(token: str) -> CallerContext:
        payload = TokenHandler.verify_token(token)
        try:
            claims = TokenData(**payload)
            return CallerContext(identity=int(claims.sub), role=claims.role, email=claims.email)
        except ValueError:
            raise MalformedTokenError("Token claims are invalid")
