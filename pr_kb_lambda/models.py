"""
Request / Result Models
-----------------------
Plain records passed between the handler stages. Nothing here is persisted;
a record lives for the duration of one invocation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_NUMBER_OF_RESULTS,
    DEFAULT_SEARCH_TYPE,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
)


@dataclass
class RequestRecord:
    """Normalized request fields with defaults applied."""
    
    repository: Optional[str] = None
    pr_number: Any = None
    diff: Optional[str] = None
    pr_description: str = ""
    branch: str = "main"
    commit_sha: str = "unknown"
    repository_url: str = ""
    
    # Generation tuning
    knowledge_base_id: Optional[str] = None
    model_id: Optional[str] = None
    number_of_results: int = DEFAULT_NUMBER_OF_RESULTS
    search_type: str = DEFAULT_SEARCH_TYPE
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float = DEFAULT_TOP_P
    include_metadata: bool = True
    
    # Decoded payload, echoed back as requestParameters
    raw: Dict[str, Any] = field(default_factory=dict)
    
    @classmethod
    def from_payload(
        cls,
        payload: Dict[str, Any],
        knowledge_base_id: str,
        model_id: str,
    ) -> "RequestRecord":
        """
        Build a record from a decoded request body.
        
        Args:
            payload: Decoded JSON body (may be empty)
            knowledge_base_id: Default knowledge base when the body has none
            model_id: Default model when the body has none
        """
        return cls(
            repository=payload.get("repository"),
            pr_number=payload.get("pr_number"),
            diff=payload.get("diff"),
            pr_description=payload.get("pr_description", ""),
            branch=payload.get("branch", "main"),
            commit_sha=payload.get("commitSha", "unknown"),
            repository_url=payload.get("repositoryUrl", ""),
            knowledge_base_id=payload.get("knowledgeBaseId", knowledge_base_id),
            model_id=payload.get("modelId", model_id),
            number_of_results=payload.get("numberOfResults", DEFAULT_NUMBER_OF_RESULTS),
            search_type=payload.get("searchType", DEFAULT_SEARCH_TYPE),
            max_tokens=payload.get("maxTokens", DEFAULT_MAX_TOKENS),
            temperature=payload.get("temperature", DEFAULT_TEMPERATURE),
            top_p=payload.get("topP", DEFAULT_TOP_P),
            include_metadata=payload.get("includeMetadata", True),
            raw=payload,
        )
    
    @property
    def repository_key(self) -> str:
        """Repository segment of the storage key."""
        return str(self.repository) if self.repository is not None else "unknown"
    
    @property
    def pr_key(self) -> str:
        """Pull-request segment of the storage key."""
        return str(self.pr_number) if self.pr_number is not None else "unknown"


@dataclass
class GenerationResult:
    """Text returned by the knowledge base plus the knobs that produced it."""
    
    generated_text: str
    session_id: Optional[str]
    knowledge_base_id: str
    model_id: str
    search_type: str
    number_of_results: int
    max_tokens: int
    temperature: float
    top_p: float


def iso_timestamp(now: datetime = None) -> str:
    """UTC ISO-8601 timestamp with millisecond precision, e.g. 2024-05-01T12:30:45.123Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def file_timestamp(now: datetime = None) -> str:
    """Timestamp safe for file names and S3 keys (':' and '.' become '-')."""
    return iso_timestamp(now).replace(":", "-").replace(".", "-")
