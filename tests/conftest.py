import os
import sys
from pathlib import Path

import pytest
from werkzeug.security import generate_password_hash

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

# Must be set before app.py reads its config
os.environ["FINANCE_DATABASE_URL"] = "sqlite://"
os.environ["FINANCE_SECRET_KEY"] = "test-secret"
os.environ["FINANCE_TOAST_PRESENTATION"] = "banner"

from app import app as flask_app, db, User  # noqa: E402


@pytest.fixture
def app():
    flask_app.config.update(TESTING=True)
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    u = User(username="alice", password=generate_password_hash("s3cret"))
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def auth_client(client, user):
    client.post("/login", data={"username": "alice", "password": "s3cret"})
    return client
