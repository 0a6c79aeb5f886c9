import pytest

from app.core.errors import NotFoundError, ValidationError
from app.db.repositories.images import ImageRepository
from app.features.media.stores import DatabaseImageStore, FileImageStore, ImageUpload

from conftest import GIF_BYTES, PNG_BYTES


def upload(content: bytes, filename: str = "pic.png", content_type: str = "image/png") -> ImageUpload:
    return ImageUpload(filename=filename, content=content, content_type=content_type)


@pytest.fixture
def db_store(session):
    return DatabaseImageStore(ImageRepository(session), max_mb=1)


@pytest.fixture
def file_store(tmp_path):
    return FileImageStore(str(tmp_path / "uploads"), max_mb=1)


@pytest.fixture(params=["db", "file"])
def store(request, db_store, file_store):
    return db_store if request.param == "db" else file_store


class TestContract:
    def test_save_get_delete(self, store):
        ref = store.save(upload(PNG_BYTES))
        image = store.get(ref)
        assert image.content == PNG_BYTES
        assert image.content_type == "image/png"
        store.delete(ref)
        with pytest.raises(NotFoundError):
            store.get(ref)

    def test_content_type_is_sniffed(self, store):
        ref = store.save(upload(GIF_BYTES, filename="pic.png", content_type="image/png"))
        assert store.get(ref).content_type == "image/gif"

    def test_references_are_unique(self, store):
        assert store.save(upload(PNG_BYTES)) != store.save(upload(PNG_BYTES))

    def test_unknown_reference(self, store):
        with pytest.raises(NotFoundError):
            store.get("999999")
        with pytest.raises(NotFoundError):
            store.delete("999999")

    def test_empty_upload_rejected(self, store):
        with pytest.raises(ValidationError):
            store.save(upload(b""))

    def test_non_image_rejected(self, store):
        with pytest.raises(ValidationError):
            store.save(upload(b"%PDF-1.4 not an image", filename="doc.pdf", content_type="application/pdf"))

    def test_too_large_rejected(self, store):
        with pytest.raises(ValidationError):
            store.save(upload(PNG_BYTES + b"\0" * (1024 * 1024)))


def test_database_reference_is_row_id(db_store, session):
    ref = db_store.save(upload(PNG_BYTES))
    assert ref.isdigit()
    assert ImageRepository(session).get(int(ref)).filename == "pic.png"


def test_database_rejects_non_numeric_reference(db_store):
    with pytest.raises(NotFoundError):
        db_store.get("abc")


def test_file_reference_is_a_plain_filename(file_store, tmp_path):
    ref = file_store.save(upload(PNG_BYTES))
    assert ref.endswith(".png")
    assert (tmp_path / "uploads" / ref).read_bytes() == PNG_BYTES


@pytest.mark.parametrize("ref", ["../secret.png", "..", "sub/dir.png", ""])
def test_file_store_refuses_paths_outside_upload_dir(file_store, tmp_path, ref):
    (tmp_path / "secret.png").write_bytes(PNG_BYTES)
    with pytest.raises(NotFoundError):
        file_store.get(ref)
    with pytest.raises(NotFoundError):
        file_store.delete(ref)
    assert (tmp_path / "secret.png").exists()
