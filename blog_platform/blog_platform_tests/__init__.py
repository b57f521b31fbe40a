"""
blog_platform_tests package

Tests for the blog service:

- password hashing and tokens (`test_auth.py`)
- table creation (`test_db_init.py`)
- data-access functions (`test_user_repository.py`, `test_post_repository.py`)
- HTTP routes (`test_users_api.py`, `test_posts_api.py`, `test_app.py`)
"""
