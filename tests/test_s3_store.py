"""
Unit tests for the S3 artifact store and local staging.
"""

import builtins
import os
from unittest.mock import patch, MagicMock

import pytest
from botocore.exceptions import ClientError

from pr_kb_lambda.storage.s3_store import S3ArtifactStore


def _store(tmp_path, client=None):
    return S3ArtifactStore(
        bucket="test-bucket",
        region="us-west-2",
        tmp_dir=str(tmp_path),
        client=client or MagicMock(),
    )


class TestStaging:
    """Tests for the local temp-file lifecycle."""

    def test_stage_writes_and_removes(self, tmp_path):
        store = _store(tmp_path)

        with store.stage("artifact.txt", "hello") as path:
            assert path == os.path.join(str(tmp_path), "artifact.txt")
            with open(path, encoding="utf-8") as f:
                assert f.read() == "hello"

        assert not os.path.exists(path)

    def test_stage_removes_on_error(self, tmp_path):
        store = _store(tmp_path)

        with pytest.raises(RuntimeError):
            with store.stage("artifact.txt", "hello") as path:
                raise RuntimeError("upload failed")

        assert not os.path.exists(path)


class TestS3ArtifactStore:

    def test_upload_reads_staged_file(self, tmp_path):
        mock_client = MagicMock()
        mock_client.put_object.return_value = {"ETag": '"abc"'}
        store = _store(tmp_path, mock_client)

        with store.stage("artifact.txt", "generated text") as path:
            etag = store.upload(path, "repo/1/artifact.txt", {"search-type": "HYBRID"})

        assert etag == '"abc"'
        mock_client.put_object.assert_called_once_with(
            Bucket="test-bucket",
            Key="repo/1/artifact.txt",
            Body=b"generated text",
            ContentType="text/plain",
            Metadata={"search-type": "HYBRID"},
        )

    def test_upload_error_propagates(self, tmp_path):
        mock_client = MagicMock()
        mock_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )
        store = _store(tmp_path, mock_client)

        with pytest.raises(ClientError):
            with store.stage("artifact.txt", "text") as path:
                store.upload(path, "repo/1/artifact.txt", {})

        assert os.listdir(tmp_path) == []

    def test_presigned_url(self, tmp_path):
        mock_client = MagicMock()
        mock_client.generate_presigned_url.return_value = "https://signed.example/url"
        store = _store(tmp_path, mock_client)

        url = store.presigned_url("repo/testcases-1.txt", 86400)

        assert url == "https://signed.example/url"
        mock_client.generate_presigned_url.assert_called_once_with(
            'get_object',
            Params={'Bucket': 'test-bucket', 'Key': 'repo/testcases-1.txt'},
            ExpiresIn=86400,
        )

    def test_location(self, tmp_path):
        assert _store(tmp_path).location("repo/1/a.txt") == "s3://test-bucket/repo/1/a.txt"

    @patch('pr_kb_lambda.storage.s3_store.boto3')
    def test_lazy_client_uses_s3v4(self, mock_boto3):
        store = S3ArtifactStore(bucket="b", region="us-west-2")
        mock_boto3.client.assert_not_called()

        store.s3_client
        store.s3_client

        mock_boto3.client.assert_called_once()
        args, kwargs = mock_boto3.client.call_args
        assert args == ('s3',)
        assert kwargs["config"].signature_version == 's3v4'
        assert kwargs["config"].region_name == 'us-west-2'


class TestStagingFailures:
    """Staging must not leave files behind when the write itself fails."""

    def test_stage_removes_file_when_write_fails(self, tmp_path):
        store = _store(tmp_path)

        with pytest.raises(UnicodeEncodeError):
            with store.stage("artifact.txt", "commit \ud800"):
                pass

        assert os.listdir(tmp_path) == []

    @patch('pr_kb_lambda.storage.base.open', create=True)
    def test_stage_removes_file_on_disk_full(self, mock_open, tmp_path):
        path = os.path.join(str(tmp_path), "artifact.txt")

        def _create_then_fail(file_path, *args, **kwargs):
            with builtins.open(file_path, "w"):
                pass
            raise OSError(28, "No space left on device")

        mock_open.side_effect = _create_then_fail
        store = _store(tmp_path)

        with pytest.raises(OSError):
            with store.stage("artifact.txt", "text"):
                pass

        assert not os.path.exists(path)

    def test_stage_flattens_path_separators(self, tmp_path):
        store = _store(tmp_path)

        with store.stage("testcases-12/3-stamp.txt", "text") as path:
            assert os.path.dirname(path) == str(tmp_path)
            assert os.path.basename(path) == "testcases-12-3-stamp.txt"

        assert os.listdir(tmp_path) == []
