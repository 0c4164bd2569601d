from quart import Response, current_app, request

from . import api_blueprint
from core.models import Rating
from repositories import post_repository
from services import feed_service, pool_service
from services.query.search import search
from utils import api_handler, success_response
from utils.request_helpers import get_current_user, get_page_arg, require_json_body
from utils.validation import (
    validate_boolean,
    validate_enum,
    validate_integer,
    validate_string,
    validate_string_list,
)


@api_blueprint.route('/posts')
@api_handler()
async def list_posts():
    """Search posts: ?tags=<query text>&page=<1-based page>."""
    query_text = request.args.get('tags', '')
    page = get_page_arg(request)
    posts, page_count = search(query_text, get_current_user(), page=page)
    return {
        "posts": [post.to_dict() for post in posts],
        "page": page,
        "page_count": page_count,
    }


@api_blueprint.route('/posts.xml')
@api_handler()
async def posts_rss():
    settings = current_app.config['RUNTIME_CONFIG_STORE'].snapshot()
    body = feed_service.posts_feed(request.args.get('tags', ''), settings)
    return Response(body, content_type='application/rss+xml; charset=utf-8')


@api_blueprint.route('/post', methods=['POST'])
@api_handler(require_login=True)
async def create_post():
    """Register a post for media files already placed in FILES_DIRECTORY."""
    user = get_current_user()
    data = await require_json_body(request)
    post_id = post_repository.create_post(
        uploader_id=user.id,
        media=validate_string(data.get('media'), 'media'),
        media_type=validate_string(data.get('media_type', 'image'), 'media_type'),
        width=validate_integer(data.get('width', 0), 'width', min_value=0),
        height=validate_integer(data.get('height', 0), 'height', min_value=0),
        thumbnail=validate_string(data.get('thumbnail'), 'thumbnail'),
        thumbnail_width=validate_integer(data.get('thumbnail_width', 0), 'thumbnail_width', min_value=0),
        thumbnail_height=validate_integer(data.get('thumbnail_height', 0), 'thumbnail_height', min_value=0),
        tags_text=validate_string(data.get('tags'), 'tags', allow_empty=True),
    )
    return {"post_id": post_id}


@api_blueprint.route('/post/<int:post_id>')
@api_handler()
async def get_post(post_id):
    user = get_current_user()
    post = post_repository.get_post(post_id, user)
    related = post_repository.get_related_posts(post, user)
    pools = pool_service.get_pool_data_for_post(post_id, user)
    return {
        "post": post,
        "parent": related['parent'].to_dict() if related['parent'] else None,
        "children": [child.to_dict() for child in related['children']],
        "pools": [pool.to_dict() for pool in pools],
        "can_edit": pool_service.can_edit(post['uploader_id'], user),
    }


@api_blueprint.route('/post/<int:post_id>/details', methods=['PUT'])
@api_handler(require_login=True)
async def update_post_details(post_id):
    data = await require_json_body(request)
    post = post_repository.update_post_details(
        post_id,
        get_current_user(),
        title=validate_string(data.get('title'), 'title', allow_empty=True),
        description=validate_string(data.get('description'), 'description', allow_empty=True),
        is_public=validate_boolean(data.get('is_public'), 'is_public'),
        rating=validate_enum(data.get('rating', Rating.UNRATED.value), 'rating', Rating.codes()),
        sources=validate_string_list(data.get('sources'), 'sources'),
        tags_text=validate_string(data.get('tags'), 'tags', allow_empty=True),
        parent_text=str(data.get('parent_post') or ''),
    )
    return {"post": post}


@api_blueprint.route('/post/<int:post_id>', methods=['DELETE'])
@api_handler(require_login=True)
async def delete_post(post_id):
    post_repository.delete_post(post_id, get_current_user())
    return success_response(message="Post deleted.")
