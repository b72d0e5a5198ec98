"""
Session Model

The storage scope every repository call runs under.

DESIGN DECISION: The current user is not an ambient global. Callers hold
an explicit, immutable Session and pass it to the repositories. The
"zero or one user" rule is carried by the type: Session.user is Optional.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from cashflow.models.finance import User


class Session(BaseModel):
    """
    With no user, keys are used unchanged; with a user, each key gets
    "_<user id>" appended.
    """
    model_config = ConfigDict(frozen=True)

    user: Optional[User] = None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    def scoped_key(self, base_key: str) -> str:
        if self.user is None:
            return base_key
        return f"{base_key}_{self.user.id}"
