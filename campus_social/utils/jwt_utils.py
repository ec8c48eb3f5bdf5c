import jwt
from datetime import datetime, timedelta
from typing import Optional

from ..config import JWT_SECRET_KEY, JWT_ALGORITHM, JWT_EXPIRES_DAYS


def create_jwt_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    issued = datetime.utcnow()
    to_encode.update({"iat": issued, "exp": issued + (expires_delta or timedelta(days=JWT_EXPIRES_DAYS))})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def user_token(user_id) -> str:
    # get_current_user reads the `user_id` claim
    return create_jwt_token({"user_id": str(user_id)})
