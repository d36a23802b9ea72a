# =============================================================================
# TESTS - Blob Store
# =============================================================================

from pathlib import Path

import pytest


class TestSafeFilename:
    """Tests for upload name sanitizing."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("report.pdf", "report.pdf"),
            ("../../etc/passwd", "passwd"),
            ("my essay (final).docx", "my_essay_final_.docx"),
            ("...", "upload"),
        ],
    )
    def test_safe_filename(self, name, expected):
        from classroom.storage.blobs import safe_filename

        assert safe_filename(name) == expected


class TestLocalBlobStore:
    """Tests for local uploads."""

    @pytest.mark.asyncio
    async def test_upload_writes_file(self, tmp_path):
        from classroom.storage import LocalBlobStore

        url = await LocalBlobStore(tmp_path / "uploads").upload("notes.txt", b"hello")

        assert url.startswith("file://")
        files = list((tmp_path / "uploads").iterdir())
        assert len(files) == 1
        assert files[0].name.endswith("_notes.txt")
        assert files[0].read_bytes() == b"hello"

    @pytest.mark.asyncio
    async def test_write_failure_raises_store_error(self, tmp_path):
        from classroom.core import StoreError
        from classroom.storage import LocalBlobStore

        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")

        with pytest.raises(StoreError):
            await LocalBlobStore(Path(blocker)).upload("a.txt", b"data")
