from typing import Optional

from app.models import Role, Session, UserProfile
from app.store import RecordStore

ROLE_KEY = "userRole"
NAME_KEY = "userName"
EMAIL_KEY = "userEmail"
MOBILE_KEY = "userMobile"
USER_ID_KEY = "userId"
LOGGED_IN_KEY = "isLoggedIn"

_ALL_KEYS = (ROLE_KEY, NAME_KEY, EMAIL_KEY, MOBILE_KEY, USER_ID_KEY, LOGGED_IN_KEY)


class SessionStore:
    """
    The signed-in user, kept as plain string scalars next to the collections.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def sign_in(self, profile: UserProfile) -> Session:
        self.store.set_text(USER_ID_KEY, profile.id)
        self.store.set_text(NAME_KEY, profile.name)
        self.store.set_text(EMAIL_KEY, profile.email)
        self.store.set_text(MOBILE_KEY, profile.mobile)
        self.store.set_text(ROLE_KEY, profile.role.value)
        self.store.set_text(LOGGED_IN_KEY, "true")
        return self.current()

    def current(self) -> Optional[Session]:
        user_id = self.store.get_text(USER_ID_KEY)
        if self.store.get_text(LOGGED_IN_KEY) != "true" or not user_id:
            return None
        return Session(
            user_id=user_id,
            role=self.role(),
            name=self.store.get_text(NAME_KEY) or "",
            email=self.store.get_text(EMAIL_KEY) or "",
            mobile=self.store.get_text(MOBILE_KEY) or "",
        )

    def role(self) -> Optional[Role]:
        try:
            return Role(self.store.get_text(ROLE_KEY))
        except ValueError:
            return None

    def set_role(self, role: Optional[Role]) -> None:
        if role is None:
            self.store.remove(ROLE_KEY)
        else:
            self.store.set_text(ROLE_KEY, role.value)

    def sign_out(self) -> None:
        for key in _ALL_KEYS:
            self.store.remove(key)
