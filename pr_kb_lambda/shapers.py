"""
Response Shapers
----------------
Variant-specific half of artifact persistence: the file name and key layout,
the artifact body, the object metadata, and the success payload returned to
the caller.

Routing:
- knowledge_base → KnowledgeBaseShaper (full answer, s3:// location)
- test_cases     → MobileQAShaper (structured artifact, pre-signed link)
"""

import base64
import json
from abc import ABC, abstractmethod
from typing import Any, Dict

from .models import GenerationResult, RequestRecord, iso_timestamp
from .storage.base import ArtifactStore

PREVIEW_LENGTH = 200


class ResponseShaper(ABC):
    """Shared metadata handling; subclasses own layout and payload."""
    
    error_message = "Request failed"
    
    @abstractmethod
    def file_name(self, record: RequestRecord, stamp: str) -> str:
        """Artifact file name for this invocation."""
    
    @abstractmethod
    def key(self, record: RequestRecord, file_name: str) -> str:
        """Storage key for the artifact."""
    
    @abstractmethod
    def render(self, record: RequestRecord, query: str, result: GenerationResult) -> str:
        """Artifact body written to the store."""
    
    @abstractmethod
    def shape(
        self,
        record: RequestRecord,
        query: str,
        result: GenerationResult,
        key: str,
        file_name: str,
        store: ArtifactStore,
    ) -> Dict[str, Any]:
        """Success payload returned to the caller."""
    
    def metadata(
        self,
        record: RequestRecord,
        query: str,
        result: GenerationResult,
        stamp: str,
    ) -> Dict[str, str]:
        """S3 object metadata; values must be plain strings."""
        return {
            "knowledge-base-id": str(result.knowledge_base_id),
            "model-id": str(result.model_id),
            "session-id": result.session_id or "none",
            "query-hash": base64.b64encode(query.encode("utf-8")).decode("ascii")[:50],
            "search-type": str(result.search_type),
            "timestamp": stamp,
        }


class KnowledgeBaseShaper(ResponseShaper):
    """Full knowledge-base answer stored under {repository}/{pr_number}/."""
    
    error_message = "Failed to query knowledge base"
    
    def file_name(self, record: RequestRecord, stamp: str) -> str:
        return f"bedrock-response-{stamp}.txt"
    
    def key(self, record: RequestRecord, file_name: str) -> str:
        return f"{record.repository_key}/{record.pr_key}/{file_name}"
    
    def render(self, record: RequestRecord, query: str, result: GenerationResult) -> str:
        if record.include_metadata:
            parameters = json.dumps(record.raw, indent=2, default=str)
        else:
            parameters = "Metadata excluded"
        
        return f"""
=== Bedrock Knowledge Base Response ===
Timestamp: {iso_timestamp()}
Knowledge Base ID: {result.knowledge_base_id}
Model: {result.model_id}
Query: {query}
Session ID: {result.session_id or "N/A"}
Search Type: {result.search_type}
Number of Results: {result.number_of_results}
Temperature: {result.temperature}
Max Tokens: {result.max_tokens}
git diff: {record.diff}
repository: {record.repository}
pr_number: {record.pr_number}

=== Generated Response ===
{result.generated_text}

=== Request Parameters ===
{parameters}

=== Additional Information ===
Response generated using AWS Bedrock Knowledge Base integration
Processed at: {iso_timestamp()}
"""
    
    def shape(self, record, query, result, key, file_name, store):
        return {
            "message": "Knowledge base query completed successfully",
            "s3Location": store.location(key),
            "fileName": file_name,
            "sessionId": result.session_id,
            "query": query,
            "knowledgeBaseId": result.knowledge_base_id,
            "modelId": result.model_id,
            "responsePreview": result.generated_text[:PREVIEW_LENGTH] + "...",
            "requestParameters": record.raw,
        }


class MobileQAShaper(ResponseShaper):
    """Mobile QA test cases, handed back as a pre-signed link."""
    
    error_message = "Failed to generate test cases"
    
    PRIORITY = "high"
    TIMEOUT_SECONDS = 180
    JIRA_TICKET_PLACEHOLDER = "JIRA-PLACEHOLDER"
    
    def __init__(self, app_package: str, url_expiry: int = 86400):
        self.app_package = app_package
        self.url_expiry = url_expiry
    
    def file_name(self, record: RequestRecord, stamp: str) -> str:
        return f"testcases-{record.pr_key}-{stamp}.txt"
    
    def key(self, record: RequestRecord, file_name: str) -> str:
        return f"{record.repository_key}/{file_name}"
    
    def render(self, record: RequestRecord, query: str, result: GenerationResult) -> str:
        return f"""Test cases for {record.repository} PR #{record.pr_number}
Branch: {record.branch}
Commit: {record.commit_sha}
Generated at: {iso_timestamp()}

{result.generated_text}
"""
    
    def metadata(self, record, query, result, stamp):
        tags = super().metadata(record, query, result, stamp)
        tags["repository"] = record.repository_key
        tags["pr-number"] = record.pr_key
        return tags
    
    def shape(self, record, query, result, key, file_name, store):
        return {
            "appPackage": self.app_package,
            "testName": f"{record.repository} PR #{record.pr_number} test cases",
            "testInstructionsUrl": store.presigned_url(key, self.url_expiry),
            "priority": self.PRIORITY,
            "timeout": self.TIMEOUT_SECONDS,
            "metadata": {
                "jiraTicketId": self.JIRA_TICKET_PLACEHOLDER,
                "commitSha": record.commit_sha,
                "repositoryUrl": record.repository_url,
                "prNumber": record.pr_number,
                "branch": record.branch,
            },
        }
