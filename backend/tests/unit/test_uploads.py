"""Tests for upload orchestration."""
import pytest


class TestUpload:
    """Test the upload pipeline."""

    def test_upload_stores_file_and_row(self, upload_service, storage, sample_tenant, sample_user, make_image):
        """Test an upload stores the file and the row."""
        buffer = make_image((2400, 1600), noise=True, quality=95)

        doc = upload_service.upload(
            tenant_id=sample_tenant.id,
            user_id=sample_user.id,
            buffer=buffer,
            original_filename="invoice.jpg",
            mime_type="image/jpeg",
            document_type="racun",
            document_subtype="ulazni",
            user_comment="Mart",
            page_number=2,
            total_pages=3,
        )

        assert doc.tenant_id == sample_tenant.id
        assert doc.original_name == "invoice.jpg"
        assert doc.mime_type == "image/jpeg"
        assert doc.original_size == len(buffer)
        assert doc.compressed_size == len(storage.read(doc.filename))
        assert doc.compression_ratio >= 0
        assert doc.document_subtype == "ulazni"
        assert doc.user_comment == "Mart"
        assert (doc.page_number, doc.total_pages) == (2, 3)
        assert doc.filename.startswith("racun_")
        assert doc.filename.endswith(".jpg")

    def test_unknown_type_writes_nothing(self, upload_service, settings, sample_tenant, sample_user, make_image):
        """Test an unknown type writes no file."""
        from pathlib import Path
        from dokumenta.errors import ValidationError

        with pytest.raises(ValidationError):
            upload_service.upload(
                tenant_id=sample_tenant.id,
                user_id=sample_user.id,
                buffer=make_image(),
                original_filename="a.jpg",
                mime_type="image/jpeg",
                document_type="faktura",
            )

        upload_dir = Path(settings.upload_dir)
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []

    def test_storage_quota_enforced(self, db_session, upload_service, document_store, sample_tenant, sample_user, make_image):
        """Test the storage quota blocks an upload."""
        from dokumenta.errors import LimitExceeded

        sample_tenant.max_storage_mb = 0
        db_session.commit()

        with pytest.raises(LimitExceeded):
            upload_service.upload(
                tenant_id=sample_tenant.id,
                user_id=sample_user.id,
                buffer=make_image(),
                original_filename="a.jpg",
                mime_type="image/jpeg",
                document_type="racun",
            )
        assert document_store.get_all(sample_tenant.id) == []

    def test_storage_failure_leaves_no_row(self, tmp_path, db_session, settings, accounts, document_store, lifecycle, sample_tenant, sample_user, make_image):
        """Test a storage failure leaves no row."""
        from dokumenta.errors import StorageWriteError
        from dokumenta.services.processing import FileProcessor
        from dokumenta.services.storage import FileStorage
        from dokumenta.services.uploads import UploadService

        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        processor = FileProcessor(settings, FileStorage(blocker))
        service = UploadService(db_session, settings, processor, accounts, document_store, lifecycle)

        with pytest.raises(StorageWriteError):
            service.upload(
                tenant_id=sample_tenant.id,
                user_id=sample_user.id,
                buffer=make_image(),
                original_filename="a.jpg",
                mime_type="image/jpeg",
                document_type="racun",
            )
        assert document_store.get_all(sample_tenant.id) == []

    def test_failed_insert_removes_file(self, upload_service, settings, other_tenant, sample_user, make_image):
        """Test a failed insert removes the stored file."""
        from pathlib import Path
        from dokumenta.errors import NotFoundError

        # sample_user does not belong to other_tenant
        with pytest.raises(NotFoundError):
            upload_service.upload(
                tenant_id=other_tenant.id,
                user_id=sample_user.id,
                buffer=make_image(),
                original_filename="a.jpg",
                mime_type="image/jpeg",
                document_type="racun",
            )

        assert list(Path(settings.upload_dir).iterdir()) == []
