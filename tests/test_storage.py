from app.utils import storage

PHOTO_URL = "https://proj.supabase.co/storage/v1/object/public/review-photos/u1/2024/look.jpg"


class FakeS3:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        if self.error:
            raise self.error
        self.calls.append((operation, Params, ExpiresIn))
        return f"https://signed.example/{Params['Key']}?expires={ExpiresIn}"


def test_extract_photo_path():
    assert storage.extract_photo_path(PHOTO_URL) == "u1/2024/look.jpg"
    assert storage.extract_photo_path("https://cdn.example/other.jpg") is None
    assert storage.extract_photo_path("") is None


def test_signs_bucket_urls_for_one_hour(monkeypatch):
    s3 = FakeS3()
    monkeypatch.setattr(storage, "get_storage_client", lambda: s3)

    signed = storage.get_signed_photo_url(PHOTO_URL)

    assert signed == "https://signed.example/u1/2024/look.jpg?expires=3600"
    operation, params, expires = s3.calls[0]
    assert operation == "get_object"
    assert params == {"Bucket": "review-photos", "Key": "u1/2024/look.jpg"}
    assert expires == 3600


def test_foreign_urls_are_returned_unchanged(monkeypatch):
    s3 = FakeS3()
    monkeypatch.setattr(storage, "get_storage_client", lambda: s3)
    assert storage.get_signed_photo_url("https://cdn.example/a.jpg") == "https://cdn.example/a.jpg"
    assert s3.calls == []


def test_signing_failure_falls_back_to_original(monkeypatch):
    monkeypatch.setattr(storage, "get_storage_client", lambda: FakeS3(error=Exception("denied")))
    assert storage.get_signed_photo_url(PHOTO_URL) == PHOTO_URL


def test_signs_lists(monkeypatch):
    monkeypatch.setattr(storage, "get_storage_client", lambda: FakeS3())
    assert len(storage.get_signed_photo_urls([PHOTO_URL, PHOTO_URL])) == 2
    assert storage.get_signed_photo_urls(None) == []
