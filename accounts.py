"""
Login and signup.

Password checks go through a CredentialVerifier so the stored format can
change without touching the routes. The default verifier compares
plaintext by equality; HashedCredentialVerifier uses passlib.
"""
import logging
from typing import Any, Dict, List

from passlib.context import CryptContext
from pymongo.errors import DuplicateKeyError, PyMongoError

from config import settings
from database import create_document, find_document, public_document
from errors import Conflict, StoreFailure, Unauthorized
from schemas import User

logger = logging.getLogger(__name__)


class CredentialVerifier:
    def hash(self, password: str) -> str:
        raise NotImplementedError

    def verify(self, password: str, stored: str) -> bool:
        raise NotImplementedError


class PlaintextCredentialVerifier(CredentialVerifier):
    def hash(self, password: str) -> str:
        return password

    def verify(self, password: str, stored: str) -> bool:
        return password == stored


class HashedCredentialVerifier(CredentialVerifier):
    def __init__(self, schemes: List[str]):
        self.context = CryptContext(schemes=schemes, deprecated="auto")

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, password: str, stored: str) -> bool:
        if not stored:
            return False
        try:
            return self.context.verify(password, stored)
        except ValueError:
            # stored value is not a hash this context recognises
            return False


def get_verifier() -> CredentialVerifier:
    if settings.credential_scheme == "hashed":
        return HashedCredentialVerifier(settings.password_schemes)
    return PlaintextCredentialVerifier()


def login(email: str, password: str, verifier: CredentialVerifier) -> Dict[str, Any]:
    try:
        doc = find_document("user", {"email": email})
    except PyMongoError as e:
        logger.error(f"Error during login: {e}")
        raise StoreFailure("Server error", body_key="message")

    if not doc or not verifier.verify(password, doc.get("password", "")):
        raise Unauthorized("Invalid credentials")
    return public_document(doc)


def signup(user: User, verifier: CredentialVerifier) -> Dict[str, Any]:
    user_doc = user.model_copy(update={"password": verifier.hash(user.password)})
    try:
        saved = create_document("user", user_doc)
    except DuplicateKeyError:
        logger.info(f"Signup rejected, email already registered: {user.email}")
        raise Conflict("Email already registered", body_key="message")
    except PyMongoError as e:
        logger.error(f"Signup error: {e}")
        raise StoreFailure("Error during signup", body_key="message")
    return public_document(saved)
