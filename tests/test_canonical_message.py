"""
Test suite for canonical string construction

The canonical string must match what the storage service rebuilds byte for
byte, so most assertions here compare exact strings.
"""

import itertools
from datetime import datetime, timezone

import pytest

from gstorage.signing import (
    EXCLUDED_HEADERS,
    CanonicalRequestBuilder,
    HttpMethod,
    SignParams,
    build_canonical_string,
    canonical_headers,
    normalize_headers,
    object_path,
)


class TestCanonicalHeaders:
    """Test header block rendering"""

    def test_no_headers_is_empty_string(self):
        """Zero headers render as the empty string, not a lone newline"""
        assert canonical_headers({}) == ""
        assert canonical_headers(None) == ""

    def test_single_header(self):
        assert canonical_headers({"x-goog-meta-owner": "alice"}) == "x-goog-meta-owner:alice\n"

    def test_names_trimmed_and_lowercased(self):
        """Test name and value normalization"""
        headers = {
            " X-Goog-Meta-B ": "  two ",
            "x-goog-META-a": "one",
        }
        assert canonical_headers(headers) == "x-goog-meta-a:one\nx-goog-meta-b:two\n"

    def test_sorted_bytewise(self):
        """Names sort by byte value, so '-' sorts before '_' and digits before letters"""
        headers = {
            "x-goog-meta_z": "3",
            "x-goog-meta-z": "2",
            "x-goog-meta-1": "1",
        }
        assert canonical_headers(headers) == (
            "x-goog-meta-1:1\n"
            "x-goog-meta-z:2\n"
            "x-goog-meta_z:3\n"
        )

    def test_order_independent(self):
        """Any insertion order yields the same block"""
        items = [
            ("x-goog-meta-c", "3"),
            ("Content-Disposition", "attachment"),
            ("x-goog-acl", "private"),
        ]
        rendered = {
            canonical_headers(dict(permutation))
            for permutation in itertools.permutations(items)
        }
        assert rendered == {
            "content-disposition:attachment\nx-goog-acl:private\nx-goog-meta-c:3\n"
        }

    @pytest.mark.parametrize("name", [
        "x-goog-encryption-key",
        "X-Goog-Encryption-Key",
        "  x-goog-encryption-key-sha256  ",
        "X-GOOG-ENCRYPTION-KEY-SHA256",
    ])
    def test_encryption_headers_excluded(self, name):
        """Encryption key headers never appear whatever their casing"""
        block = canonical_headers({name: "secret", "x-goog-meta-a": "1"})
        assert block == "x-goog-meta-a:1\n"
        assert "encryption" not in block

    def test_only_excluded_headers_is_empty(self):
        headers = {
            "x-goog-encryption-key": "k",
            "x-goog-encryption-key-sha256": "h",
        }
        assert canonical_headers(headers) == ""

    def test_other_encryption_headers_kept(self):
        """Only the two excluded names are dropped"""
        block = canonical_headers({"x-goog-encryption-algorithm": "AES256"})
        assert block == "x-goog-encryption-algorithm:AES256\n"

    def test_duplicate_names_last_inserted_wins(self):
        """Names that normalize alike keep the value inserted last"""
        headers = {
            "X-Goog-Meta-A": "first",
            " x-goog-meta-a": "second",
        }
        assert canonical_headers(headers) == "x-goog-meta-a:second\n"

        reversed_headers = {
            " x-goog-meta-a": "second",
            "X-Goog-Meta-A": "first",
        }
        assert canonical_headers(reversed_headers) == "x-goog-meta-a:first\n"

    def test_normalize_headers_pairs(self):
        pairs = normalize_headers({"B": "2", "a": " 1 ", "x-goog-encryption-key": "k"})
        assert pairs == [("a", "1"), ("b", "2")]

    def test_excluded_headers_constant(self):
        assert EXCLUDED_HEADERS == {"x-goog-encryption-key", "x-goog-encryption-key-sha256"}


class TestObjectPath:
    """Test resource path rendering"""

    @pytest.mark.parametrize("bucket,object_name", [
        ("/b/", "o"),
        ("b", "/o"),
        ("b", "o"),
        ("//b//", "/o"),
    ])
    def test_slash_normalization(self, bucket, object_name):
        assert object_path(bucket, object_name) == "/b/o"

    def test_only_one_leading_object_slash_removed(self):
        assert object_path("b", "//o") == "/b//o"

    def test_nested_object(self):
        assert object_path("my-bucket", "dir/sub/file.txt") == "/my-bucket/dir/sub/file.txt"

    def test_no_escaping(self):
        """Path characters are not percent-encoded"""
        assert object_path("b", "a b?c&d") == "/b/a b?c&d"

    def test_idempotent(self):
        once = object_path("/b/", "/o")
        assert object_path("b", once[len("/b"):]) == once


class TestCanonicalString:
    """Test full canonical string assembly"""

    def test_download_example(self):
        """Empty hash and content type keep their lines; no trailing newline"""
        params = SignParams(
            method="GET",
            content_hash="",
            content_type="",
            expiration=1700000000,
            bucket="my-bucket",
            object_name="file.txt",
        )
        assert build_canonical_string(params) == "GET\n\n\n1700000000\n/my-bucket/file.txt"

    def test_upload_with_headers(self):
        params = SignParams(
            method="PUT",
            content_hash="rL0Y20zC+Fzt72VPzMSk2A==",
            content_type="text/plain",
            expiration=1700000000,
            headers={"X-Goog-Meta-Owner": "alice", "x-goog-acl": "private"},
            bucket="b",
            object_name="o.txt",
        )
        assert build_canonical_string(params) == (
            "PUT\n"
            "rL0Y20zC+Fzt72VPzMSk2A==\n"
            "text/plain\n"
            "1700000000\n"
            "x-goog-acl:private\n"
            "x-goog-meta-owner:alice\n"
            "/b/o.txt"
        )

    def test_all_fields_empty(self):
        """Unset fields render as empty lines and expiration as 0"""
        assert build_canonical_string(SignParams()) == "\n\n\n0\n//"

    def test_http_method_enum(self):
        params = SignParams(method=HttpMethod.DELETE, expiration=5, bucket="b", object_name="o")
        assert params.method == "DELETE"
        assert build_canonical_string(params) == "DELETE\n\n\n5\n/b/o"

    def test_datetime_expiration(self):
        """Datetimes convert to Unix seconds; naive ones are read as UTC"""
        aware = SignParams(expiration=datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc))
        naive = SignParams(expiration=datetime(2023, 11, 14, 22, 13, 20))
        assert aware.expiration == 1700000000
        assert naive.expiration == 1700000000

    def test_datetime_assigned_later(self):
        params = SignParams(method="GET", bucket="b", object_name="o")
        params.expiration = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert build_canonical_string(params) == "GET\n\n\n1700000000\n/b/o"

    def test_float_expiration_truncated(self):
        assert SignParams(expiration=1700000000.9).expiration == 1700000000

    def test_invalid_expiration_type(self):
        with pytest.raises(TypeError):
            SignParams(expiration="1700000000")

    def test_pure_function(self):
        """Same params always render identically"""
        params = SignParams(
            method="GET",
            expiration=1700000000,
            headers={"b": "2", "a": "1"},
            bucket="b",
            object_name="o",
        )
        assert build_canonical_string(params) == build_canonical_string(params)
        copy = SignParams(
            method="GET",
            expiration=1700000000,
            headers={"a": "1", "b": "2"},
            bucket="b",
            object_name="o",
        )
        assert build_canonical_string(params) == build_canonical_string(copy)

    def test_builder_parts(self):
        params = SignParams(headers={"A": "1"}, bucket="/b/", object_name="/o")
        builder = CanonicalRequestBuilder(params)
        assert builder.header_string() == "a:1\n"
        assert builder.object_path() == "/b/o"

    def test_caller_headers_not_aliased(self):
        """SignParams keeps its own copy of the headers mapping"""
        headers = {"a": "1"}
        params = SignParams(headers=headers, bucket="b", object_name="o")
        headers["b"] = "2"
        assert params.headers == {"a": "1"}

    def test_with_expiration_copies(self):
        params = SignParams(method="GET", expiration=1, bucket="b", object_name="o")
        later = params.with_expiration(2)
        assert params.expiration == 1
        assert later.expiration == 2
        assert later.bucket == "b"
