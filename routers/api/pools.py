from quart import request

from . import api_blueprint
from repositories import pool_repository
from services import pool_service
from utils import api_handler, success_response
from utils.request_helpers import get_current_user, get_page_arg, require_json_body
from utils.validation import validate_boolean, validate_integer, validate_string


@api_blueprint.route('/pools')
@api_handler()
async def list_pools():
    page = get_page_arg(request)
    pools, page_count = pool_service.list_pools(get_current_user(), page)
    return {"pools": pools, "page": page, "page_count": page_count}


@api_blueprint.route('/pool', methods=['POST'])
@api_handler(require_login=True)
async def create_pool():
    """Create a new private pool owned by the caller."""
    data = await require_json_body(request)
    name = validate_string(data.get('pool'), 'pool')
    pool_id = pool_repository.create_pool(name, get_current_user().id)
    return {"pool_id": pool_id, "message": f"Pool '{name}' created successfully."}


@api_blueprint.route('/pool/<int:pool_id>')
@api_handler()
async def get_pool(pool_id):
    """A visible pool with its visible members in order."""
    user = get_current_user()
    pool = pool_service.get_pool(pool_id, user)
    posts = pool_service.pool_contents(pool_id, user)
    return {"pool": pool, "posts": [post.to_dict() for post in posts]}


@api_blueprint.route('/pool/<int:pool_id>', methods=['DELETE'])
@api_handler(require_login=True)
async def delete_pool(pool_id):
    pool_service.require_editable_pool(pool_id, get_current_user())
    pool_repository.delete_pool(pool_id)
    return success_response(message="Pool deleted successfully.")


@api_blueprint.route('/pool/<int:pool_id>/name', methods=['PUT'])
@api_handler(require_login=True)
async def rename_pool(pool_id):
    data = await require_json_body(request)
    pool_service.require_editable_pool(pool_id, get_current_user())
    name = validate_string(data.get('pool_name'), 'pool_name')
    pool_repository.rename_pool(pool_id, name)
    return {"name": name}


@api_blueprint.route('/pool/<int:pool_id>/public', methods=['PUT'])
@api_handler(require_login=True)
async def change_pool_visibility(pool_id):
    data = await require_json_body(request)
    pool_service.require_editable_pool(pool_id, get_current_user())
    is_public = validate_boolean(data.get('is_public'), 'is_public')
    pool_repository.set_pool_visibility(pool_id, is_public)
    return {"is_public": is_public}


@api_blueprint.route('/pool/<int:pool_id>/post', methods=['POST'])
@api_handler(require_login=True)
async def add_post_to_pool(pool_id):
    data = await require_json_body(request)
    user = get_current_user()
    pool_service.require_editable_pool(pool_id, user)
    post_id = validate_integer(data.get('post_id'), 'post_id', min_value=1)
    membership = pool_service.append_to_pool(pool_id, post_id, user)
    return {"membership": membership.to_dict()}


@api_blueprint.route('/pool/<int:pool_id>/sort', methods=['PUT'])
@api_handler(require_login=True)
async def sort_pool(pool_id):
    """Move the member at old_index to new_index and return the pool in its new order."""
    data = await require_json_body(request)
    user = get_current_user()
    pool_service.require_editable_pool(pool_id, user)
    old_index = validate_integer(data.get('old_index'), 'old_index', min_value=0)
    new_index = validate_integer(data.get('new_index'), 'new_index', min_value=0)
    position = pool_service.move_within_pool(pool_id, old_index, new_index, user)
    posts = pool_service.pool_contents(pool_id, user)
    return {"position": position, "posts": [post.to_dict() for post in posts]}


@api_blueprint.route('/pool_post/<int:pool_post_id>', methods=['DELETE'])
@api_handler(require_login=True)
async def remove_pool_post(pool_post_id):
    membership = pool_service.remove_pool_post(pool_post_id, get_current_user())
    return {"membership": membership.to_dict()}
