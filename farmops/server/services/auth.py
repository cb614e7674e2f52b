"""
Bearer token verification and user resolution.

Session tokens are JWTs issued by the external identity provider. The ``sub``
claim carries the provider's user id; ``email`` and ``name`` are copied onto
the local user record the first time it is seen.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database.entities import User
from farmops.core.database.repositories import UserRepository
from farmops.core.logging_config import get_logger
from farmops.server.core.config import settings

logger = get_logger(__name__)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a session token and return its claims.

    Returns:
        The claims, or None when the token is invalid or expired
    """
    config = settings.auth
    try:
        return jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            audience=config.jwt_audience,
            issuer=config.jwt_issuer,
            options={"verify_aud": config.jwt_audience is not None},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired session token")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected invalid session token: {e}")
    return None


async def resolve_user(session: AsyncSession, claims: Dict[str, Any]) -> Optional[User]:
    """Find or create the local user for verified token claims.

    Lookup order is the external id, then an existing user with the same
    email (which gets the external id linked), then a new user.
    """
    external_id = claims.get("sub")
    if not external_id:
        logger.warning("Session token has no subject claim")
        return None

    users = UserRepository(session)
    user = await users.get_by_external_id(external_id)
    if user is not None:
        return user

    email = claims.get("email")
    if not email:
        logger.warning(f"Cannot provision user {external_id}: token has no email claim")
        return None

    user = await users.get_by_email(email)
    if user is not None:
        logger.info(f"Linking existing user {user.id} to external id {external_id}")
        return await users.apply(user, {"external_id": external_id})

    logger.info(f"Creating user for external id {external_id}")
    return await users.create(User(external_id=external_id, email=email, name=claims.get("name")))
