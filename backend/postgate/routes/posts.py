from __future__ import annotations
from flask import Blueprint, request, abort, current_app
from postgate import get_db
from postgate.constants.permissions import POSTS_READ, POSTS_CREATE, POSTS_UPDATE, POSTS_DELETE
from postgate.decorators.auth import require_permissions
from postgate.models.post import Post
from postgate.services.policy import current_principal
from postgate.services.posts import AccessOutcome, load_post_for
from postgate.utils.listing import apply_pagination, build_list_payload, isoformat
from postgate.utils.sorting import apply_multi_sort
from postgate.utils.validation import clean_str, json_object_body

posts_bp = Blueprint('posts', __name__)

# Status/message per failed lookup outcome; {verb} is filled in by the caller.
_FAILURES = {
    AccessOutcome.INVALID_IDENTIFIER: (400, 'Invalid post ID format'),
    AccessOutcome.NOT_FOUND: (404, 'Post not found'),
    AccessOutcome.FORBIDDEN: (403, 'Forbidden: You can only {verb} your own posts'),
}


@posts_bp.get('')
@require_permissions(POSTS_READ)
def list_posts():
    session = get_db()
    q = session.query(Post)
    allowed = {
        'created_at': Post.created_at,
        'updated_at': Post.updated_at,
        'title': Post.title,
        'id': Post.id,
    }
    q = apply_multi_sort(q, request.args.get('sort'), allowed, [Post.created_at.desc()], Post.id)
    paged_q, total, limit, offset = apply_pagination(q)
    rows = [post_json(p) for p in paged_q.all()]
    return build_list_payload(rows, total, limit, offset)


@posts_bp.post('')
@require_permissions(POSTS_CREATE)
def create_post():
    data = json_object_body('Please provide both title and content')
    title = clean_str(data.get('title')); content = clean_str(data.get('content'))
    if not title or not content:
        abort(400, description='Please provide both title and content')
    _check_title(title)
    principal = current_principal()
    session = get_db()
    post = Post(title=title, content=content, author_id=int(principal.id))
    session.add(post)
    session.commit()
    session.refresh(post)
    return post_json(post), 201


@posts_bp.put('/<post_id>')
@require_permissions(POSTS_UPDATE)
def update_post(post_id: str):
    data = json_object_body('Please provide title or content to update')
    title = clean_str(data.get('title')); content = clean_str(data.get('content'))
    if not title and not content:
        abort(400, description='Please provide title or content to update')
    session = get_db()
    post = _load_or_abort(session, POSTS_UPDATE, post_id, verb='update')
    if title:
        _check_title(title)
        post.title = title
    if content:
        post.content = content
    session.commit()
    session.refresh(post)
    return {'post': post_json(post)}


@posts_bp.delete('/<post_id>')
@require_permissions(POSTS_DELETE)
def delete_post(post_id: str):
    session = get_db()
    post = _load_or_abort(session, POSTS_DELETE, post_id, verb='delete')
    deleted_id = post.id
    session.delete(post)
    session.commit()
    return {'message': 'Post deleted successfully', 'deleted_id': deleted_id}


def _load_or_abort(session, action: str, post_id: str, verb: str) -> Post:
    principal = current_principal()
    result = load_post_for(session, principal, action, post_id)
    if result.ok:
        return result.post
    status, message = _FAILURES[result.outcome]
    if result.outcome is AccessOutcome.FORBIDDEN:
        current_app.logger.info('User %s (role=%s) may not %s post %s', principal.id, principal.role, verb, post_id)
    abort(status, description=message.format(verb=verb))


def _check_title(title: str):
    if len(title) > Post.TITLE_MAX:
        abort(400, description=f'title must be at most {Post.TITLE_MAX} characters')


def post_json(p: Post):
    return {
        'id': p.id,
        'title': p.title,
        'content': p.content,
        'author': {'id': p.author_id, 'username': p.author.username if p.author else None},
        'created_at': isoformat(p.created_at),
        'updated_at': isoformat(p.updated_at),
    }
