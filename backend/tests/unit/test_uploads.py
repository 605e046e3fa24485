"""
Unit tests for upload validation and staging.
"""

import pytest

from trainforge.enums.training import FileKind
from trainforge.middleware.error_handling import (
    FileTooLargeError,
    UnsupportedFileTypeError,
    ValidationError,
)
from trainforge.services.uploads import (
    discard_upload,
    max_upload_bytes,
    resolve_file_kind,
    stage_upload,
    validate_upload,
    verify_staged_upload,
)


class TestResolveFileKind:
    @pytest.mark.parametrize(
        "mime_type,expected",
        [
            ("application/pdf", FileKind.PDF),
            ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", FileKind.DOCX),
            ("application/msword", FileKind.DOCX),
            ("video/mp4", FileKind.VIDEO),
            ("video/quicktime", FileKind.VIDEO),
            ("Application/PDF; charset=binary", FileKind.PDF),
        ],
    )
    def test_allowed_types(self, mime_type, expected):
        assert resolve_file_kind(mime_type) == expected

    @pytest.mark.parametrize("mime_type", ["text/csv", "image/png", "", None])
    def test_rejected_types(self, mime_type):
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            resolve_file_kind(mime_type)
        assert exc_info.value.status_code == 415


class TestValidateUpload:
    def test_accepts_limit_exactly(self):
        assert validate_upload("application/pdf", max_upload_bytes()) == FileKind.PDF

    def test_rejects_oversized(self):
        with pytest.raises(FileTooLargeError) as exc_info:
            validate_upload("application/pdf", max_upload_bytes() + 1)
        assert exc_info.value.status_code == 413

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            validate_upload("video/mp4", 0)

    def test_type_checked_before_size(self):
        with pytest.raises(UnsupportedFileTypeError):
            validate_upload("text/plain", max_upload_bytes() + 1)


class TestStaging:
    @pytest.mark.asyncio
    async def test_stage_and_discard(self, tmp_path):
        info = await stage_upload(
            b"%PDF-1.4 data", "Safety Manual.pdf", FileKind.PDF, "editor-7", upload_dir=tmp_path
        )

        staged = tmp_path / info.file_name
        assert staged.read_bytes() == b"%PDF-1.4 data"
        assert info.file_path == str(staged)
        assert info.file_name.endswith(".pdf")
        assert info.file_name != "Safety Manual.pdf"
        assert info.file_size == 13
        assert info.uploaded_by == "editor-7"

        await discard_upload(info)
        assert not staged.exists()

    @pytest.mark.asyncio
    async def test_unique_names(self, tmp_path):
        first = await stage_upload(b"a", "same.pdf", FileKind.PDF, upload_dir=tmp_path)
        second = await stage_upload(b"b", "same.pdf", FileKind.PDF, upload_dir=tmp_path)

        assert first.file_name != second.file_name

    @pytest.mark.asyncio
    async def test_discard_missing_file_is_logged(self, file_info, upload_dir):
        (upload_dir / "staged.pdf").unlink()

        await discard_upload(file_info)


class TestVerifyStagedUpload:
    @pytest.mark.asyncio
    async def test_staged_file_accepted(self, file_info):
        await verify_staged_upload(file_info)

    @pytest.mark.asyncio
    async def test_freshly_staged_upload_accepted(self, upload_dir):
        info = await stage_upload(b"%PDF-1.7 body", "guide.pdf", FileKind.PDF)

        await verify_staged_upload(info)

    @pytest.mark.asyncio
    async def test_path_outside_staging_area_rejected(self, file_info):
        forged = file_info.model_copy(
            update={"file_name": "passwd", "file_path": "/etc/passwd", "file_size": 999999}
        )

        with pytest.raises(ValidationError) as exc_info:
            await verify_staged_upload(forged)
        assert exc_info.value.details["file_path"] == "/etc/passwd"

    @pytest.mark.asyncio
    async def test_path_escaping_staging_area_rejected(self, file_info, upload_dir):
        outside = upload_dir.parent / "outside.pdf"
        outside.write_bytes(b"%PDF-1.4")
        forged = file_info.model_copy(
            update={"file_name": "outside.pdf", "file_path": str(upload_dir / ".." / "outside.pdf")}
        )

        with pytest.raises(ValidationError):
            await verify_staged_upload(forged)

    @pytest.mark.asyncio
    async def test_file_name_mismatch_rejected(self, file_info):
        with pytest.raises(ValidationError):
            await verify_staged_upload(file_info.model_copy(update={"file_name": "other.pdf"}))

    @pytest.mark.asyncio
    async def test_missing_file_rejected(self, file_info, upload_dir):
        (upload_dir / "staged.pdf").unlink()

        with pytest.raises(ValidationError):
            await verify_staged_upload(file_info)

    @pytest.mark.asyncio
    async def test_size_mismatch_rejected(self, file_info):
        with pytest.raises(ValidationError) as exc_info:
            await verify_staged_upload(file_info.model_copy(update={"file_size": 999999}))

        assert exc_info.value.details == {"expected": 999999, "actual": 8}
