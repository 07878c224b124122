"""
Unit tests for request records and timestamp helpers.
"""

from datetime import datetime, timezone

from pr_kb_lambda.models import RequestRecord, file_timestamp, iso_timestamp


class TestRequestRecord:
    """Tests for RequestRecord.from_payload."""

    def test_defaults(self):
        record = RequestRecord.from_payload({}, knowledge_base_id="KB1", model_id="m1")

        assert record.repository is None
        assert record.pr_number is None
        assert record.diff is None
        assert record.pr_description == ""
        assert record.branch == "main"
        assert record.commit_sha == "unknown"
        assert record.repository_url == ""
        assert record.knowledge_base_id == "KB1"
        assert record.model_id == "m1"
        assert record.number_of_results == 5
        assert record.search_type == "HYBRID"
        assert record.max_tokens == 1000
        assert record.temperature == 0.7
        assert record.top_p == 0.9
        assert record.include_metadata is True
        assert record.raw == {}

    def test_overrides(self):
        payload = {
            "repository": "acme-shop",
            "pr_number": "7",
            "knowledgeBaseId": "KB2",
            "modelId": "m2",
            "numberOfResults": 10,
            "searchType": "SEMANTIC",
            "maxTokens": 2048,
            "temperature": 0.1,
            "topP": 0.5,
            "includeMetadata": False,
            "commitSha": "deadbeef",
        }

        record = RequestRecord.from_payload(payload, knowledge_base_id="KB1", model_id="m1")

        assert record.knowledge_base_id == "KB2"
        assert record.model_id == "m2"
        assert record.number_of_results == 10
        assert record.search_type == "SEMANTIC"
        assert record.max_tokens == 2048
        assert record.temperature == 0.1
        assert record.top_p == 0.5
        assert record.include_metadata is False
        assert record.commit_sha == "deadbeef"
        assert record.raw is payload

    def test_key_segments(self):
        record = RequestRecord.from_payload(
            {"repository": "acme-shop", "pr_number": 12}, knowledge_base_id="KB", model_id="m"
        )
        assert record.repository_key == "acme-shop"
        assert record.pr_key == "12"

        empty = RequestRecord.from_payload({}, knowledge_base_id="KB", model_id="m")
        assert empty.repository_key == "unknown"
        assert empty.pr_key == "unknown"


class TestTimestamps:
    """Tests for timestamp formatting."""

    def test_iso_timestamp(self):
        now = datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)
        assert iso_timestamp(now) == "2024-05-01T12:30:45.123Z"

    def test_file_timestamp(self):
        now = datetime(2024, 5, 1, 12, 30, 45, 7000, tzinfo=timezone.utc)
        assert file_timestamp(now) == "2024-05-01T12-30-45-007Z"

    def test_default_is_now(self):
        stamp = iso_timestamp()
        parsed = datetime.strptime(stamp, "%Y-%m-%dT%H:%M:%S.%fZ")
        assert parsed.year >= 2024
