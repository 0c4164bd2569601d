from quart import current_app, request

from . import api_blueprint
from utils import api_handler
from utils.request_helpers import require_json_body
from utils.validation import validate_boolean, validate_string


def _store():
    return current_app.config['RUNTIME_CONFIG_STORE']


@api_blueprint.route('/settings')
@api_handler(require_admin=True)
async def get_settings():
    return {"settings": _store().snapshot().to_dict()}


@api_blueprint.route('/settings', methods=['POST'])
@api_handler(require_admin=True)
async def update_settings():
    """Update any of application_name, age_confirmation, base_url."""
    data = await require_json_body(request)

    application_name = None
    if 'application_name' in data:
        application_name = validate_string(data['application_name'], 'application_name', allow_empty=True)
    age_confirmation = None
    if 'age_confirmation' in data:
        age_confirmation = validate_boolean(data['age_confirmation'], 'age_confirmation')
    base_url = None
    if 'base_url' in data:
        base_url = validate_string(data['base_url'], 'base_url', allow_empty=True)

    snapshot = _store().update(
        application_name=application_name,
        age_confirmation=age_confirmation,
        base_url=base_url,
    )
    return {"settings": snapshot.to_dict()}
