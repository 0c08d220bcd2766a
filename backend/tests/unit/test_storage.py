"""Tests for file storage."""
import pytest


class TestFileStorage:
    """Test write/read/delete semantics."""

    def test_write_and_read(self, storage):
        """Test writing and reading a file."""
        path = storage.write("racun_1_2.jpg", b"data")

        assert path == storage.root / "racun_1_2.jpg"
        assert storage.read("racun_1_2.jpg") == b"data"

    def test_never_overwrites(self, storage):
        """Test an existing file is never overwritten."""
        from dokumenta.errors import StorageWriteError

        storage.write("same.jpg", b"first")
        with pytest.raises(StorageWriteError):
            storage.write("same.jpg", b"second")
        assert storage.read("same.jpg") == b"first"

    def test_missing_file_is_not_found(self, storage):
        """Test reading a missing file raises not found."""
        from dokumenta.errors import NotFoundError

        with pytest.raises(NotFoundError):
            storage.read("nope.jpg")

    def test_delete_missing_file_tolerated(self, storage):
        """Test deleting a missing file is tolerated."""
        assert storage.delete("nope.jpg") is False

    @pytest.mark.parametrize("name", ["../etc/passwd", "a/b.jpg", "", ".."])
    def test_path_traversal_rejected(self, storage, name):
        """Test path traversal is refused."""
        from dokumenta.errors import NotFoundError

        with pytest.raises(NotFoundError):
            storage.path_for(name)
