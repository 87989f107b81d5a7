#!/usr/bin/env python
"""Idempotent seed script for demo users & posts.

Usage:
    python backend/scripts/seed.py              # create missing users/posts
    python backend/scripts/seed.py --reset      # delete all posts & users first
    python backend/scripts/seed.py --dry-run    # run logic then rollback (no DB changes)
"""
from __future__ import annotations
import os, sys, argparse, textwrap
from sqlalchemy import select, delete, text

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from postgate import create_app, get_db  # type: ignore
from postgate.constants.permissions import Role
from postgate.models.authz import Base, User
from postgate.models.post import Post

DEMO_USERS = [
    ('admin', 'admin123', Role.ADMIN),
    ('editor', 'editor123', Role.EDITOR),
    ('viewer', 'viewer123', Role.VIEWER),
]

DEMO_POSTS = [
    (
        'admin',
        'Welcome to the Posts RBAC System',
        'This is a post created by the Admin user. It demonstrates the role-based access '
        'control system where different users have different permissions.',
    ),
    (
        'editor',
        'My First Post as an Editor',
        'This post was created by the Editor user. Editors can create, edit, and delete '
        'their own posts, but cannot modify posts created by others.',
    ),
]


def reset(session):
    session.execute(delete(Post))
    session.execute(delete(User))
    print('[INFO] Database cleared')


def ensure_users(session):
    existing = {u.username: u for u in session.execute(select(User)).scalars().all()}
    created = 0
    for username, password, role in DEMO_USERS:
        if username in existing:
            continue
        user = User(username=username, password_hash='', role=role.value)
        user.set_password(password)
        session.add(user)
        existing[username] = user
        created += 1
    session.flush()
    return existing, created


def ensure_posts(session, users):
    created = 0
    for author, title, content in DEMO_POSTS:
        owner = users.get(author)
        if owner is None:
            print(f"[WARN] Missing author {author}; skipping post {title!r}")
            continue
        dup = session.execute(select(Post).where(Post.title == title, Post.author_id == owner.id)).scalar_one_or_none()
        if dup:
            continue
        session.add(Post(title=title, content=content, author_id=owner.id))
        created += 1
    return created


def parse_args():
    p = argparse.ArgumentParser(
        description="Seed demo users & posts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed.py\n  start over: seed.py --reset\n  dry run: seed.py --dry-run\n"""),
    )
    p.add_argument('--reset', action='store_true', help='Delete all users and posts before seeding')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    return p.parse_args()


def main():
    args = parse_args()
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            session.execute(text('SELECT 1 FROM users LIMIT 1'))
        except Exception:
            # Bootstrap schema when migrations have not been run yet
            session.rollback()
            Base.metadata.create_all(session.get_bind())

        try:
            if args.reset:
                reset(session)
            users, created_u = ensure_users(session)
            created_p = ensure_posts(session, users)
            if args.dry_run:
                session.rollback()
                print(f"[DRY-RUN] (rolled back) Users would create: {created_u}, Posts would create: {created_p}")
            else:
                session.commit()
                print(f"[DONE] Users created: {created_u}, Posts created: {created_p}")
                print('\nLogin credentials:')
                for username, password, role in DEMO_USERS:
                    print(f"  {role.value}: username={username}, password={password}")
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


if __name__ == '__main__':
    main()
