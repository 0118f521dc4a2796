from functools import wraps

from flask import current_app, request
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from backoffice import storage
from backoffice.errors import Unauthenticated, Forbidden, InternalError, error_response


# Role-based access control decorator
def role_required(*allowed_roles):
    """Gate a view on an authenticated session and a role allow-list.

    The resolved `User` is passed to the view as its first positional
    argument, ahead of the URL parameters.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return error_response(Unauthenticated())

            try:
                user = storage.get_user(current_user.user_id)
            except SQLAlchemyError as e:
                current_app.logger.error(f"User lookup failed for session {current_user.id}: {e}", exc_info=True)
                return error_response(InternalError())

            if user is None or not user.is_active or user.role not in allowed_roles:
                current_app.logger.info(
                    f"Denied {request.method} {request.path} for user {current_user.id} "
                    f"(role={user.role if user else None})"
                )
                return error_response(Forbidden())
            return f(user, *args, **kwargs)
        return decorated_function
    return decorator


def get_payload():
    """The parsed JSON body, or None when the body is missing or not JSON."""
    return request.get_json(silent=True)
