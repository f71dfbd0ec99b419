from unittest.mock import MagicMock

import pytest

from portal.errors import GatewayError
from portal.services.storage import LocalStorage, SupabaseStorage, safe_name


def test_safe_name_prefixes_hash_and_strips_path():
    name = safe_name("../../etc/my paper (final).pdf", b"data")
    assert name.endswith("_my_paper_final_.pdf")
    assert len(name.split("_", 1)[0]) == 12


def test_local_upload_and_remove(tmp_path):
    storage = LocalStorage(tmp_path)
    path = storage.upload("papers", "paper.pdf", b"%PDF", "application/pdf")

    assert path.startswith("papers/")
    assert (tmp_path / path).read_bytes() == b"%PDF"

    storage.remove(path)
    assert not (tmp_path / path).exists()
    storage.remove(path)


def test_supabase_upload_uses_bucket():
    client = MagicMock()
    storage = SupabaseStorage(client, buckets={"payments": "slips"})

    path = storage.upload("payments", "slip.png", b"png", "image/png")

    assert path.startswith("slips/")
    client.storage.from_.assert_called_with("slips")
    client.storage.from_.return_value.upload.assert_called_once()


def test_supabase_upload_failure():
    client = MagicMock()
    client.storage.from_.return_value.upload.side_effect = RuntimeError("bucket missing")
    with pytest.raises(GatewayError):
        SupabaseStorage(client).upload("papers", "p.pdf", b"x", "application/pdf")


def test_supabase_remove_splits_bucket():
    client = MagicMock()
    SupabaseStorage(client).remove("papers/abc_p.pdf")
    client.storage.from_.assert_called_with("papers")
    client.storage.from_.return_value.remove.assert_called_with(["abc_p.pdf"])


def test_identical_uploads_get_distinct_paths(tmp_path):
    storage = LocalStorage(tmp_path)
    first = storage.upload("papers", "paper.pdf", b"%PDF", "application/pdf")
    second = storage.upload("papers", "paper.pdf", b"%PDF", "application/pdf")

    assert first != second
    storage.remove(second)
    assert (tmp_path / first).read_bytes() == b"%PDF"
