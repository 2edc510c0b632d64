"""Tests for candidate and batch validation."""

from __future__ import annotations

import io
import json

import pytest

from s3upsert.exceptions import CandidateValidationError
from s3upsert.formats import (
    coerce_body,
    is_json_string,
    is_valid_content_encoding,
    parse_metadata,
)
from s3upsert.models import UploadCandidate
from s3upsert.validation import validate_batch, validate_candidate
from tests.fixtures.candidates import make_candidate, raw_objects


def make_candidate_raw(**overrides: object) -> UploadCandidate:
    """Validate a default raw candidate with *overrides* applied."""
    raw = raw_objects(1)[0]
    raw.update(overrides)
    return validate_candidate(raw)


class TestValidateCandidate:
    """Tests for validate_candidate()."""

    def test_text_body_is_utf8_encoded(self) -> None:
        candidate = validate_candidate(
            {"bucket": "b", "key": "k", "body": "привет", "contentType": "text/plain"}
        )
        assert candidate.body == "привет".encode()
        assert candidate.content_type == "text/plain"

    def test_bytes_body_kept_verbatim(self) -> None:
        candidate = make_candidate(body=b"\x00\x01")
        assert candidate.body == b"\x00\x01"

    def test_snake_case_field_names_accepted(self) -> None:
        candidate = validate_candidate(
            {"bucket": "b", "key": "k", "body": "x", "content_type": "text/plain"}
        )
        assert candidate.content_type == "text/plain"

    def test_existing_candidate_passes_through(self) -> None:
        candidate = make_candidate()
        assert validate_candidate(candidate) is candidate

    @pytest.mark.parametrize("missing", ["bucket", "key", "body", "contentType"])
    def test_missing_required_field(self, missing: str) -> None:
        raw = raw_objects(1)[0]
        del raw[missing]
        with pytest.raises(CandidateValidationError) as exc_info:
            validate_candidate(raw)
        assert exc_info.value.field == missing

    @pytest.mark.parametrize("field", ["bucket", "key", "body", "contentType"])
    def test_empty_required_field(self, field: str) -> None:
        raw = raw_objects(1)[0]
        raw[field] = ""
        with pytest.raises(CandidateValidationError):
            validate_candidate(raw)

    def test_non_text_body_rejected(self) -> None:
        with pytest.raises(CandidateValidationError):
            validate_candidate(
                {"bucket": "b", "key": "k", "body": 42, "contentType": "text/plain"}
            )

    def test_not_a_mapping(self) -> None:
        with pytest.raises(CandidateValidationError, match="list"):
            validate_candidate(["b", "k"])  # type: ignore[arg-type]

    def test_metadata_json_string_is_parsed(self) -> None:
        candidate = make_candidate(metadata='{"owner": "ci", "rev": 3}')
        assert candidate.metadata == {"owner": "ci", "rev": "3"}

    def test_metadata_mapping_kept(self) -> None:
        candidate = make_candidate(metadata={"owner": "ci"})
        assert candidate.metadata == {"owner": "ci"}

    @pytest.mark.parametrize(
        "metadata",
        ["not json", "[1, 2]", 17, {"nested": {"a": 1}}],
        ids=["garbage", "json-array", "number", "nested"],
    )
    def test_malformed_metadata(self, metadata: object) -> None:
        with pytest.raises(CandidateValidationError) as exc_info:
            make_candidate_raw(metadata=metadata)
        assert exc_info.value.field == "metadata"

    def test_invalid_acl(self) -> None:
        with pytest.raises(CandidateValidationError, match="ACL"):
            make_candidate_raw(acl="everyone")

    def test_valid_acl_and_encoding(self) -> None:
        candidate = make_candidate(acl="public-read", contentEncoding="gzip")
        assert candidate.acl == "public-read"
        assert candidate.content_encoding == "gzip"

    def test_invalid_content_encoding(self) -> None:
        with pytest.raises(CandidateValidationError, match="encoding"):
            make_candidate_raw(contentEncoding="rot13")

    def test_candidate_is_immutable(self) -> None:
        candidate = make_candidate()
        with pytest.raises(ValueError, match="frozen"):
            candidate.key = "other"  # type: ignore[misc]


class TestValidateBatch:
    """Tests for validate_batch()."""

    def test_list_of_dicts(self) -> None:
        batch = validate_batch(raw_objects(3))
        assert [c.key for c in batch] == ["obj-0.txt", "obj-1.txt", "obj-2.txt"]

    def test_json_string_array(self) -> None:
        batch = validate_batch(json.dumps(raw_objects(2)))
        assert len(batch) == 2

    @pytest.mark.parametrize("raw", ["{not json", '{"a": 1}', {"a": 1}, 5])
    def test_not_an_array(self, raw: object) -> None:
        with pytest.raises(CandidateValidationError):
            validate_batch(raw)

    def test_empty_batch(self) -> None:
        with pytest.raises(CandidateValidationError, match="пуст"):
            validate_batch([])

    @pytest.mark.parametrize("bad_index", [0, 1, 2])
    def test_one_invalid_element_rejects_all(self, bad_index: int) -> None:
        objects = raw_objects(3)
        del objects[bad_index]["contentType"]
        with pytest.raises(CandidateValidationError) as exc_info:
            validate_batch(objects)
        assert exc_info.value.index == bad_index


class TestFormats:
    """Tests for low-level format helpers."""

    def test_is_json_string(self) -> None:
        assert is_json_string('{"a": 1}')
        assert is_json_string("[]")
        assert not is_json_string("{")
        assert not is_json_string({"a": 1})

    def test_parse_metadata_none(self) -> None:
        assert parse_metadata(None) is None

    def test_parse_metadata_bool_values(self) -> None:
        assert parse_metadata({"flag": True}) == {"flag": "true"}

    def test_content_encoding_list(self) -> None:
        assert is_valid_content_encoding("gzip, br")
        assert not is_valid_content_encoding("gzip, rot13")

    def test_binary_stream_body_is_read(self) -> None:
        stream = io.BytesIO(b"\x00\x01payload")

        assert coerce_body(stream) == b"\x00\x01payload"
        assert stream.read() == b""

    def test_text_stream_body_is_utf8_encoded(self) -> None:
        assert coerce_body(io.StringIO("привет")) == "привет".encode()

    def test_stream_returning_non_bytes_rejected(self) -> None:
        class _Odd:
            def read(self) -> int:
                return 42

        with pytest.raises(ValueError, match="body stream returned int"):
            coerce_body(_Odd())

    def test_empty_stream_body_rejected(self) -> None:
        with pytest.raises(CandidateValidationError, match="body"):
            validate_candidate(
                {
                    "bucket": "b",
                    "key": "k",
                    "body": io.BytesIO(b""),
                    "contentType": "text/plain",
                }
            )
