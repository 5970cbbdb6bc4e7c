# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Settings are loaded BEFORE the application is configured: the swagger
# blueprint is only mounted when DEBUG is on.
# =============================================================================

import pytest
from sanic import Sanic

from blogs_sanic import settings

Sanic.test_mode = True

settings.load(DEBUG=True, DEV=True)

from blogs_sanic import application  # noqa: E402
from blogs_sanic.blog import BlogStore  # noqa: E402


@pytest.fixture(scope='session')
def app():
    return application.configure()


@pytest.fixture
def store(app):
    """A fresh store seeded with the three demo blogs, for every test."""
    app.ctx.blog_store = BlogStore.from_records(settings.get('SEED_BLOGS'))
    return app.ctx.blog_store


@pytest.fixture
def client(app, store):
    return app.test_client


@pytest.fixture
def restore_settings():
    """Undo settings loaded by a test."""
    saved = dict(settings.working_settings)
    yield settings
    settings.working_settings.clear()
    settings.working_settings.update(saved)
