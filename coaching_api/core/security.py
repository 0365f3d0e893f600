# coaching_api/core/security.py

from datetime import datetime, timedelta, timezone
import re
import secrets
from typing import Dict, Optional, Any
from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext

from coaching_api.core.config import settings, get_jwt_settings, get_token_expires_delta
from coaching_api.core.errors import TokenExpiredError, MalformedTokenError
from coaching_api.core.logging import logger

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=settings.PASSWORD_HASH_ROUNDS
)


def get_password_hash(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised or corrupt hash
        return False


class TokenType:
    ACCESS = "access"


class TokenHandler:
    """JWT token generation and validation"""

    @staticmethod
    def create_token(
        data: Dict[str, Any],
        surface: Optional[str] = None,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Sign a bearer token.

        Args:
            data: Claims identifying the account (sub, role, email)
            surface: Login surface, selects the lifetime from TOKEN_TTL_MINUTES
            expires_delta: Explicit lifetime overriding the surface lookup
        """
        jwt_settings = get_jwt_settings()
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else get_token_expires_delta(surface))

        to_encode = data.copy()
        to_encode.update({
            "iat": now,
            "exp": expire,
            "iss": jwt_settings["token_issuer"],
            "type": TokenType.ACCESS,
            "jti": secrets.token_urlsafe(16)
        })

        return jwt.encode(
            to_encode,
            jwt_settings["secret_key"],
            algorithm=jwt_settings["algorithm"]
        )

    @staticmethod
    def verify_token(token: str) -> Dict[str, Any]:
        """
        Verify signature, expiry and issuer of a token.

        Raises:
            TokenExpiredError: If the token is past its expiry
            MalformedTokenError: For any other decoding or claim failure
        """
        jwt_settings = get_jwt_settings()
        try:
            payload = jwt.decode(
                token,
                jwt_settings["secret_key"],
                algorithms=[jwt_settings["algorithm"]],
                issuer=jwt_settings["token_issuer"]
            )
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            logger.warning(f"Token verification failed: {SecurityLogging.mask_sensitive_data(str(e))}")
            raise MalformedTokenError()

        if payload.get("type") != TokenType.ACCESS or not payload.get("sub") or not payload.get("role"):
            raise MalformedTokenError("Token is missing required claims")
        return payload


class SecurityLogging:
    """Authentication audit logging with secrets scrubbed"""
    JWT_PATTERN = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]*")

    @classmethod
    def mask_sensitive_data(cls, data: str) -> str:
        return cls.JWT_PATTERN.sub("[REDACTED_TOKEN]", data)

    @classmethod
    def log_auth_event(cls, event_type: str, email: Optional[str] = None,
                       success: bool = True, details: Optional[str] = None) -> None:
        message = f"auth:{event_type} email={email} success={success}"
        if details:
            message += f" details={cls.mask_sensitive_data(details)}"
        extra = {"event": event_type}
        if success:
            logger.info(message, extra=extra)
        else:
            logger.warning(message, extra=extra)
