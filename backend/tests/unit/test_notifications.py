"""Tests for the notification feed."""
import pytest


class TestRender:
    """Test message templates."""

    def test_render_without_comment(self):
        """Test rendering a template."""
        from dokumenta.models.notification import NotificationType
        from dokumenta.services.notifications import render

        title, message = render(NotificationType.DOCUMENT_APPROVED, name="racun.pdf")

        assert title == "Dokument odobren"
        assert message == 'Vaš dokument "racun.pdf" je odobren.'

    def test_render_with_comment(self):
        """Test rendering a template with a comment."""
        from dokumenta.models.notification import NotificationType
        from dokumenta.services.notifications import render

        _, message = render(NotificationType.RESHOOT_REQUESTED, comment="Isečen ugao", name="a.jpg")

        assert message.endswith(" Komentar: Isečen ugao")


class TestFeed:
    """Test listing and acknowledging notifications."""

    def test_upload_creates_notification(self, notifications, sample_user, uploaded_document):
        """Test an upload creates an unread notification."""
        feed = notifications.list_for_user(sample_user.id)

        assert len(feed) == 1
        assert feed[0].type == "document_uploaded"
        assert feed[0].document_id == uploaded_document.id
        assert feed[0].is_read is False
        assert notifications.unread_count(sample_user.id) == 1

    def test_unread_filter(self, notifications, sample_user):
        """Test filtering by read state."""
        from dokumenta.models.notification import NotificationType

        first = notifications.create(sample_user.id, NotificationType.DOCUMENT_APPROVED, "t", "m")
        notifications.create(sample_user.id, NotificationType.DOCUMENT_REJECTED, "t", "m")
        notifications.mark_read(sample_user.id, first.id)

        unread = notifications.list_for_user(sample_user.id, unread=True)
        read = notifications.list_for_user(sample_user.id, unread=False)

        assert [n.type for n in unread] == ["document_rejected"]
        assert [n.id for n in read] == [first.id]

    def test_mark_read_stamps_time(self, notifications, sample_user):
        """Test marking read stamps read_at."""
        from dokumenta.models.notification import NotificationType

        created = notifications.create(sample_user.id, NotificationType.DOCUMENT_APPROVED, "t", "m")
        marked = notifications.mark_read(sample_user.id, created.id)

        assert marked.is_read is True
        assert marked.read_at is not None
        assert notifications.unread_count(sample_user.id) == 0

    def test_mark_read_scoped_to_owner(self, accounts, notifications, sample_tenant, sample_user):
        """Test only the owner can mark a notification read."""
        from dokumenta.errors import NotFoundError
        from dokumenta.models.notification import NotificationType
        from dokumenta.schemas.user import UserCreate

        other = accounts.create_user(sample_tenant.id, UserCreate(username="marko", password="x"))
        created = notifications.create(sample_user.id, NotificationType.DOCUMENT_APPROVED, "t", "m")

        with pytest.raises(NotFoundError):
            notifications.mark_read(other.id, created.id)
        assert notifications.unread_count(sample_user.id) == 1

    def test_mark_all_read(self, notifications, sample_user):
        """Test marking every notification read."""
        from dokumenta.models.notification import NotificationType

        for _ in range(3):
            notifications.create(sample_user.id, NotificationType.DOCUMENT_APPROVED, "t", "m")

        assert notifications.mark_all_read(sample_user.id) == 3
        assert notifications.unread_count(sample_user.id) == 0

    def test_limit(self, notifications, sample_user):
        """Test the listing limit."""
        from dokumenta.models.notification import NotificationType

        for _ in range(5):
            notifications.create(sample_user.id, NotificationType.DOCUMENT_APPROVED, "t", "m")

        assert len(notifications.list_for_user(sample_user.id, limit=2)) == 2


class TestEventBus:
    """Test in-process event delivery."""

    def test_subclass_handlers_receive_event(self):
        """Test base class subscribers receive subclass events."""
        from dokumenta.services.events import DocumentEvent, DocumentUploaded, EventBus

        received = []
        bus = EventBus()
        bus.subscribe(DocumentEvent, received.append)
        bus.subscribe(DocumentUploaded, received.append)

        bus.publish(DocumentUploaded(document_id=1, tenant_id=1, user_id=1, original_name="a", document_type="racun"))

        assert len(received) == 2

    def test_failing_handler_does_not_stop_others(self):
        """Test a failing handler does not block the rest."""
        from dokumenta.services.events import DocumentUploaded, EventBus

        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus = EventBus()
        bus.subscribe(DocumentUploaded, broken)
        bus.subscribe(DocumentUploaded, received.append)

        bus.publish(DocumentUploaded(document_id=1, tenant_id=1, user_id=1, original_name="a", document_type="racun"))

        assert len(received) == 1
