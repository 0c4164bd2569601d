from quart import request

from . import api_blueprint
from services import tag_service
from utils import api_handler
from utils.errors import BadRequestError
from utils.request_helpers import require_json_body
from utils.validation import validate_integer, validate_string


async def _autocomplete_body():
    data = await require_json_body(request)
    # Unstripped: selection_end indexes into the text as typed
    text = data.get('tags') or ""
    if not isinstance(text, str):
        raise BadRequestError("tags must be a string")
    selection_end = validate_integer(data.get('selection_end', len(text)), 'selection_end', min_value=0)
    return data, text, selection_end


@api_blueprint.route('/search_tags', methods=['POST'])
@api_handler()
async def search_tags():
    """Autocomplete suggestions for the token ending at selection_end."""
    _, text, selection_end = await _autocomplete_body()
    return {"tags": tag_service.suggest_completions(text, selection_end)}


@api_blueprint.route('/select_tag', methods=['POST'])
@api_handler()
async def select_tag():
    """Replace the token ending at selection_end with new_tag."""
    data, text, selection_end = await _autocomplete_body()
    new_tag = validate_string(data.get('new_tag'), 'new_tag')
    return {"tags": tag_service.select_completion(text, new_tag, selection_end)}


@api_blueprint.route('/bulk_edit_tag', methods=['POST'])
@api_handler(require_admin=True)
async def bulk_edit_tag():
    """Rename a tag, or merge it into the tag that already has the new name."""
    data = await require_json_body(request)
    result = tag_service.edit_tag(data.get('tags', ''), data.get('new_tag', ''))
    return result


@api_blueprint.route('/tags/gc', methods=['POST'])
@api_handler(require_admin=True)
async def collect_unused_tags():
    return {"removed": tag_service.collect_unused_tags()}
