"""Session identity.

Flask-Login keeps only the user id in the signed session cookie. The loader
below turns that claim back into a `SessionIdentity` without touching the
database; resolving the full user record (and its role) is the job of
`backoffice.routes.utils.role_required`.
"""
from flask_login import UserMixin, login_user, logout_user

from backoffice.errors import Unauthenticated, error_response
from backoffice.extensions import login_manager


class SessionIdentity(UserMixin):
    """The verified user identifier carried by an authenticated session."""

    def __init__(self, user_id):
        self.id = str(user_id)

    @property
    def user_id(self):
        return int(self.id)

    def __repr__(self):
        return f"<SessionIdentity {self.id}>"


@login_manager.user_loader
def load_identity(user_id):
    if user_id is not None and user_id.isdigit():
        return SessionIdentity(user_id)
    return None


@login_manager.unauthorized_handler
def unauthorized():
    return error_response(Unauthenticated())


def start_session(user):
    """Attach `user` to the current session."""
    return login_user(SessionIdentity(user.id))


def end_session():
    return logout_user()
