import pytest

from jobtrack.core.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError

PDF = "application/pdf"


def test_save_names_file_after_user_and_company(storage):
    stored = storage.save(4, "Acme & Co.", b"%PDF-1.4", PDF, "cv.pdf")

    assert stored["fileName"].startswith("user_4_Acme___Co__")
    assert stored["fileName"].endswith(".pdf")
    assert stored["filePath"] == f"interviews/resumes/{stored['fileName']}"
    assert stored["size"] == 8
    assert (storage.resume_dir / stored["fileName"]).read_bytes() == b"%PDF-1.4"


def test_save_rejects_unsupported_type(storage):
    with pytest.raises(ValidationFailedError, match="Invalid file type"):
        storage.save(1, "Acme", b"hello", "text/plain")


def test_save_rejects_large_files(storage):
    with pytest.raises(ValidationFailedError, match="File size too large"):
        storage.save(1, "Acme", b"0" * (10 * 1024 * 1024 + 1), PDF)


def test_copy_creates_new_file(storage):
    original = storage.save(2, "Acme", b"resume", PDF)

    copied = storage.copy(2, original["filePath"], "Globex")

    assert copied["fileName"] != original["fileName"]
    assert copied["fileName"].startswith("user_2_Globex_")
    assert (storage.resume_dir / copied["fileName"]).read_bytes() == b"resume"


def test_copy_missing_source(storage):
    with pytest.raises(NotFoundError):
        storage.copy(2, "interviews/resumes/user_2_nope_1.pdf", "Acme")
    with pytest.raises(ValidationFailedError):
        storage.copy(2, None, "Acme")


def test_resolve_checks_owner_prefix(storage):
    stored = storage.save(5, "Acme", b"resume", PDF)

    assert storage.resolve(stored["fileName"], 5, is_admin=False).is_file()
    assert storage.resolve(stored["fileName"], 1, is_admin=True).is_file()
    with pytest.raises(PermissionDeniedError):
        storage.resolve(stored["fileName"], 6, is_admin=False)


def test_resolve_rejects_traversal(storage):
    with pytest.raises(ValidationFailedError):
        storage.resolve("..secret", 1, is_admin=True)


def test_content_type_for():
    from jobtrack.services.resume_storage_service import ResumeStorageService

    assert ResumeStorageService.content_type_for("a.DOCX").endswith("wordprocessingml.document")
    assert ResumeStorageService.content_type_for("a.txt") == "application/octet-stream"


def test_copy_checks_owner_prefix(storage):
    original = storage.save(3, "Acme", b"resume", PDF)

    with pytest.raises(PermissionDeniedError):
        storage.copy(4, original["filePath"], "Mine")
    with pytest.raises(ValidationFailedError):
        storage.copy(3, "interviews/resumes/../" + original["fileName"], "Acme")

    copied = storage.copy(1, original["fileName"], "Review", is_admin=True)
    assert copied["fileName"].startswith("user_1_Review_")
