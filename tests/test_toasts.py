import time

import pytest
from flask import Flask

from toasts import SESSION_KEY, Notifier, ToastQueue, get_notifier


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def queue(clock):
    return ToastQueue(timeout=3, clock=clock)


class TestToastQueue:
    def test_push_keeps_insertion_order(self, queue):
        titles = ["one", "two", "three", "four"]
        for title in titles:
            queue.push(title)
        assert len(queue) == 4
        assert [t.title for t in queue] == titles

    def test_ids_are_unique(self, queue):
        ids = {queue.push("x").id for _ in range(20)}
        assert len(ids) == 20

    def test_default_expiry_uses_timeout(self, queue, clock):
        toast = queue.push("saved")
        assert toast.expires_at == clock.now + 3

    def test_each_toast_expires_on_its_own(self, queue, clock):
        slow = queue.push("slow", ttl=5)
        fast = queue.push("fast", ttl=1)
        medium = queue.push("medium", ttl=3)

        clock.advance(1)
        assert [t.id for t in queue.expire()] == [fast.id]
        assert [t.id for t in queue] == [slow.id, medium.id]

        clock.advance(2)
        assert [t.id for t in queue.expire()] == [medium.id]
        assert [t.id for t in queue] == [slow.id]

        clock.advance(2)
        queue.expire()
        assert len(queue) == 0

    def test_later_toast_does_not_push_out_earlier_one(self, queue, clock):
        first = queue.push("first")
        clock.advance(2)
        second = queue.push("second")
        clock.advance(1)
        assert [t.id for t in queue.pending()] == [second.id]
        assert first.id not in queue

    def test_dismiss_removes_only_that_toast(self, queue):
        a = queue.push("a")
        b = queue.push("b")
        c = queue.push("c")
        assert queue.dismiss(b.id) is True
        assert [t.id for t in queue] == [a.id, c.id]
        assert queue.dismiss(b.id) is False

    def test_unknown_variant_rejected(self, queue):
        with pytest.raises(ValueError):
            queue.push("oops", variant="warning")

    def test_restored_queue_keeps_order_and_expiry(self, queue, clock):
        queue.push("a", description="first", variant="destructive")
        queue.push("b")
        restored = ToastQueue.from_list(queue.to_list(), clock=clock)
        assert [(t.title, t.description, t.variant) for t in restored] == [
            ("a", "first", "destructive"),
            ("b", None, "default"),
        ]
        clock.advance(3)
        assert restored.pending() == []


@pytest.fixture
def notifier_app(clock):
    app = Flask(__name__)
    app.secret_key = "test"
    app.config["TOAST_TIMEOUT"] = 3
    notifier = Notifier(app, clock=clock)
    return app, notifier


class TestNotifier:
    def test_registers_on_app(self, notifier_app):
        app, notifier = notifier_app
        assert app.extensions["toasts"] is notifier
        with app.app_context():
            assert get_notifier() is notifier

    def test_rejects_unknown_presentation(self):
        app = Flask(__name__)
        app.config["TOAST_PRESENTATION"] = "popup"
        with pytest.raises(ValueError):
            Notifier(app)

    def test_notify_stores_in_session(self, notifier_app):
        app, notifier = notifier_app
        with app.test_request_context():
            from flask import session
            toast = notifier.notify("Saved", "Budget updated")
            assert [t.id for t in notifier.current_toasts()] == [toast.id]
            assert session[SESSION_KEY][0]["title"] == "Saved"

    def test_expired_toasts_leave_session(self, notifier_app, clock):
        app, notifier = notifier_app
        with app.test_request_context():
            from flask import session
            notifier.notify("Saved")
            clock.advance(3)
            assert notifier.current_toasts() == []
            assert SESSION_KEY not in session

    def test_dismiss(self, notifier_app):
        app, notifier = notifier_app
        with app.test_request_context():
            keep = notifier.notify("keep")
            drop = notifier.notify("drop")
            assert notifier.dismiss(drop.id) is True
            assert notifier.dismiss(drop.id) is False
            assert [t.id for t in notifier.current_toasts()] == [keep.id]


class TestToastRoutes:
    def _seed_toast(self, client, toast_id="abc123", title="Hello"):
        with client.session_transaction() as sess:
            sess[SESSION_KEY] = [{
                "id": toast_id,
                "title": title,
                "description": None,
                "variant": "default",
                "expires_at": time.time() + 60,
            }]

    def test_dismiss_known_toast(self, client):
        self._seed_toast(client)
        resp = client.post("/toasts/abc123/dismiss")
        assert resp.status_code == 204
        with client.session_transaction() as sess:
            assert SESSION_KEY not in sess

    def test_dismiss_unknown_toast(self, client):
        resp = client.post("/toasts/missing/dismiss")
        assert resp.status_code == 404

    def test_banner_rendered(self, client):
        self._seed_toast(client, title="Banner toast")
        resp = client.get("/login")
        assert "Banner toast" in resp.text
        assert 'data-toast-id="abc123"' in resp.text
        assert "data-toast-modal" not in resp.text

    def test_modal_presentation(self, app, client, monkeypatch):
        monkeypatch.setitem(app.config, "TOAST_PRESENTATION", "modal")
        self._seed_toast(client, title="Modal toast")
        resp = client.get("/login")
        assert "Modal toast" in resp.text
        assert "data-toast-modal" in resp.text

    def test_toast_persists_across_pages_until_expiry(self, client):
        self._seed_toast(client, title="Sticky")
        assert "Sticky" in client.get("/login").text
        assert "Sticky" in client.get("/login").text
