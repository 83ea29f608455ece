import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

load_dotenv()

logger = logging.getLogger(__name__)

# Supabase signs its access tokens with the project's JWT secret.
SECRET_KEY = os.getenv("SUPABASE_JWT_SECRET")
ALGORITHM = os.getenv("SUPABASE_JWT_ALGORITHM", "HS256")
AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def decode_learner_id(token: str) -> Optional[str]:
    """Return the ``sub`` claim of a valid token, else None."""

    if not SECRET_KEY:
        logger.warning("SUPABASE_JWT_SECRET is not set; treating request as guest")
        return None

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], audience=AUDIENCE)
    except JWTError:
        return None

    learner_id = payload.get("sub")
    return str(learner_id) if learner_id else None


async def get_current_learner(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
    if not token:
        # No token → guest mode
        return None
    return decode_learner_id(token)


async def require_learner(learner_id: Optional[str] = Depends(get_current_learner)) -> str:
    if not learner_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return learner_id
