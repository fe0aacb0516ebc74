import logging
import time

from jobboard.config import settings
from jobboard.schemas.user import CurrentUser, SignInRequest, User
from jobboard.store.base import DocumentStore
from jobboard.store.query import Eq, Query
from jobboard.utils.security import generate_token

logger = logging.getLogger(__name__)


class SessionService:
    """Bearer sessions for identities verified by the external OAuth provider."""

    def __init__(self):
        self._sessions: dict[str, tuple[str, float]] = {}  # token -> (user_id, expires_at)

    def _cleanup_expired(self):
        now = time.time()
        self._sessions = {t: s for t, s in self._sessions.items() if s[1] > now}

    async def find_or_create_user(self, store: DocumentStore, req: SignInRequest) -> User:
        email = req.email.strip().lower()
        user = await store.first(Query("user", (Eq("email", email),)))
        if user is None:
            user = await store.create(
                "user", {"email": email, "name": req.name, "image": req.image, "role": "jobseeker"}
            )
            logger.info("Created user %s on first sign-in", user.id)
        return user

    async def sign_in(self, store: DocumentStore, req: SignInRequest) -> tuple[str, User]:
        user = await self.find_or_create_user(store, req)
        self._cleanup_expired()
        token = generate_token()
        self._sessions[token] = (user.id, time.time() + settings.session_ttl_seconds)
        return token, user

    def user_id_for(self, token: str) -> str | None:
        self._cleanup_expired()
        session = self._sessions.get(token)
        return session[0] if session else None

    async def current_user(self, store: DocumentStore, token: str) -> CurrentUser | None:
        user_id = self.user_id_for(token)
        if user_id is None:
            return None
        user = await store.get("user", user_id)
        if user is None:
            self.revoke(token)
            return None
        return CurrentUser(id=user.id, email=user.email, role=user.role, company_id=user.company_id)

    def revoke(self, token: str) -> None:
        self._sessions.pop(token, None)

    def clear(self) -> None:
        self._sessions.clear()


session_service = SessionService()
