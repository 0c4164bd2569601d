from quart import request, session

from . import api_blueprint
from repositories import user_repository
from utils import api_handler, success_response
from utils.errors import AuthenticationError
from utils.request_helpers import get_current_user, require_json_body
from utils.validation import validate_string


@api_blueprint.route('/login', methods=['POST'])
@api_handler()
async def login():
    """Log in with username and password; the session keeps only the user id."""
    data = await require_json_body(request)
    username = validate_string(data.get('username'), 'username')
    password = validate_string(data.get('password'), 'password')

    user = user_repository.authenticate(username, password)
    if user is None:
        raise AuthenticationError("Invalid username or password")

    session['user_id'] = user.id
    session.permanent = True
    return {"user": {"id": user.id, "username": user.username, "is_admin": user.is_admin}}


@api_blueprint.route('/logout', methods=['POST'])
@api_handler()
async def logout():
    session.pop('user_id', None)
    return success_response(message="Logged out.")


@api_blueprint.route('/me')
@api_handler()
async def me():
    user = get_current_user()
    if user is None:
        return {"user": None}
    return {"user": {"id": user.id, "username": user.username, "is_admin": user.is_admin}}
