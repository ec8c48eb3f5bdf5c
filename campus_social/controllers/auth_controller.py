# campus_social/controllers/auth_controller.py
import logging

from pymongo.errors import DuplicateKeyError

from ..config import ALLOWED_EMAIL_DOMAINS
from ..db.mongo import users_collection
from ..models.user_model import UserModel
from ..schemas.auth_schema import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from ..utils.errors import AuthenticationError, AuthorizationError, ConflictError
from ..utils.hashing import hash_password, verify_password
from ..utils.jwt_utils import user_token
from .user_controller import user_out

logger = logging.getLogger(__name__)


def email_domain_allowed(email: str) -> bool:
    if not ALLOWED_EMAIL_DOMAINS:
        return True
    return any(email.lower().endswith(f"@{domain}") for domain in ALLOWED_EMAIL_DOMAINS)


# -----------------------
# Register
# -----------------------
async def register(payload: RegisterRequest) -> AuthResponse:
    email = str(payload.email).lower()
    if not email_domain_allowed(email):
        raise AuthorizationError("Registration restricted to PPSU email domains.")

    if await users_collection.find_one({"email": email}, {"_id": 1}):
        raise ConflictError("User already exists with this email.")

    user = UserModel(name=payload.name, email=email, password=hash_password(payload.password))
    doc = user.model_dump(exclude={"id"})
    try:
        result = await users_collection.insert_one(doc)
    except DuplicateKeyError:
        # Concurrent registration won the unique email index
        raise ConflictError("User already exists with this email.")
    doc["_id"] = result.inserted_id

    logger.info("registered user %s", result.inserted_id)
    token = user_token(result.inserted_id)
    return AuthResponse(message="User created successfully", token=token, user=user_out(doc))


# -----------------------
# Login with email & password
# -----------------------
async def login(payload: LoginRequest) -> AuthResponse:
    email = str(payload.email).lower()
    if not email_domain_allowed(email):
        raise AuthorizationError("Login restricted to PPSU email domains.")

    user_dict = await users_collection.find_one({"email": email})
    if not user_dict or not verify_password(payload.password, user_dict.get("password", "")):
        raise AuthenticationError("Invalid credentials.")

    user = UserModel(**user_dict)
    token = user_token(user.id)
    return AuthResponse(message="Login successful", token=token, user=user_out(user_dict))


async def me(current_user: dict) -> MeResponse:
    return MeResponse(user=user_out(current_user))
