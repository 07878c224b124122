"""
Knowledge-Base Query Lambda Handler
-----------------------------------
API Gateway / direct-invoke entry point. Each invocation:

1. decodes the request body into a RequestRecord,
2. queries the Bedrock knowledge base with the variant's prompt,
3. stages the answer on local disk, uploads it to S3 and returns a summary.

The deployment variant (HANDLER_VARIANT) picks the prompt template and the
response shaper; it never changes per request.
"""

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Tuple

from .config import HandlerConfig, Variant
from .errors import ClientInputError, UpstreamFailure
from .llm import BedrockKnowledgeBaseClient, GenerationClient
from .models import GenerationResult, RequestRecord, file_timestamp, iso_timestamp
from .prompts import build_codebase_prompt, build_test_case_prompt
from .shapers import KnowledgeBaseShaper, MobileQAShaper, ResponseShaper
from .storage import ArtifactStore, S3ArtifactStore
from .utils.logger import logger

# CORS headers for API Gateway responses
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

ERROR_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}


def _response(status_code: int, body: Any, headers: dict = None) -> dict:
    """Build API Gateway response."""
    return {
        "statusCode": status_code,
        "headers": dict(headers or CORS_HEADERS),
        "body": json.dumps(body) if body is not None else "",
    }


def _is_preflight(event: dict) -> bool:
    method = event.get("httpMethod") or (
        ((event.get("requestContext") or {}).get("http") or {}).get("method")
    )
    return (method or "").upper() == "OPTIONS"


def build_variant(config: HandlerConfig) -> Tuple[Callable[[RequestRecord], str], ResponseShaper]:
    """Return the (prompt template, response shaper) pair for the configured variant."""
    if config.variant is Variant.KNOWLEDGE_BASE:
        return build_codebase_prompt, KnowledgeBaseShaper()
    if config.variant is Variant.TEST_CASES:
        return build_test_case_prompt, MobileQAShaper(
            app_package=config.app_package,
            url_expiry=config.presigned_url_expiry,
        )
    raise ValueError(f"Unsupported handler variant: {config.variant}")


class RequestHandler:
    """Orchestrates decode → generate → persist for one deployment variant."""
    
    def __init__(
        self,
        config: HandlerConfig,
        generation_client: GenerationClient,
        artifact_store: ArtifactStore,
        prompt_template: Callable[[RequestRecord], str],
        shaper: ResponseShaper,
    ):
        self.config = config
        self.generation_client = generation_client
        self.artifact_store = artifact_store
        self.prompt_template = prompt_template
        self.shaper = shaper
    
    @classmethod
    def from_config(cls, config: HandlerConfig) -> "RequestHandler":
        """Wire the Bedrock and S3 backends for a deployed Lambda."""
        prompt_template, shaper = build_variant(config)
        return cls(
            config=config,
            generation_client=BedrockKnowledgeBaseClient(region=config.aws_region),
            artifact_store=S3ArtifactStore(
                bucket=config.bucket,
                region=config.aws_region,
                tmp_dir=config.tmp_dir,
            ),
            prompt_template=prompt_template,
            shaper=shaper,
        )
    
    def parse_request(self, event: dict) -> RequestRecord:
        """
        Decode the event body into a RequestRecord.
        
        A missing body yields an all-defaults record. A string body must be
        a JSON object.
        
        Raises:
            ClientInputError: If the body is not valid JSON
        """
        payload = {}
        body = event.get("body")
        if body:
            if isinstance(body, str):
                try:
                    payload = json.loads(body)
                except json.JSONDecodeError as e:
                    raise ClientInputError(str(e)) from e
            else:
                payload = body
            if not isinstance(payload, dict):
                raise ClientInputError("Request body must be a JSON object")
        
        return RequestRecord.from_payload(
            payload,
            knowledge_base_id=self.config.knowledge_base_id,
            model_id=self.config.model_id,
        )
    
    def query(self, record: RequestRecord) -> Tuple[str, GenerationResult]:
        """Build the prompt and run it against the knowledge base."""
        query = self.prompt_template(record)
        return query, self.generation_client.generate(query, record)
    
    def persist(self, record: RequestRecord, query: str, result: GenerationResult) -> Dict[str, Any]:
        """Stage, upload and describe the artifact for this invocation."""
        stamp = file_timestamp(datetime.now(timezone.utc))
        file_name = self.shaper.file_name(record, stamp)
        key = self.shaper.key(record, file_name)
        content = self.shaper.render(record, query, result)
        metadata = self.shaper.metadata(record, query, result, stamp)
        
        with self.artifact_store.stage(file_name, content) as path:
            self.artifact_store.upload(path, key, metadata, content_type="text/plain")
        
        return self.shaper.shape(record, query, result, key, file_name, self.artifact_store)
    
    def run(self, record: RequestRecord) -> Dict[str, Any]:
        """
        Query and persist.
        
        Raises:
            UpstreamFailure: If generation, upload or link minting fails
        """
        try:
            query, result = self.query(record)
            return self.persist(record, query, result)
        except Exception as e:
            raise UpstreamFailure(e) from e
    
    def handle(self, event: dict) -> dict:
        event = event or {}
        try:
            logger.info(f"Received event: {json.dumps(event, indent=2, default=str)}")
            
            if _is_preflight(event):
                return _response(200, None)
            
            record = self.parse_request(event)
            logger.info(f"requestData {record.raw}")
            
            return _response(200, self.run(record))
        
        except ClientInputError as e:
            logger.error(f"Error parsing request body: {e}")
            return _response(400, {
                "error": "Invalid JSON in request body",
                "details": str(e),
            })
        except Exception as e:
            logger.error(f"Lambda execution failed: {e}")
            return _response(500, {
                "error": self.shaper.error_message,
                "details": str(e),
                "timestamp": iso_timestamp(),
            }, ERROR_HEADERS)


# Lazy initialization
_handler = None


def _get_handler() -> RequestHandler:
    """Build the process-wide handler from the environment on first use."""
    global _handler
    if _handler is None:
        config = HandlerConfig.from_env()
        logger.info(f"Initializing {config.variant.value} handler in region: {config.aws_region}")
        _handler = RequestHandler.from_config(config)
    return _handler


def lambda_handler(event, context):
    return _get_handler().handle(event)
