import boto3
from botocore.exceptions import ClientError

from .base import GenerationClient
from ..models import GenerationResult, RequestRecord
from ..utils.logger import get_logger

logger = get_logger(__name__)


class BedrockKnowledgeBaseClient(GenerationClient):
    """Bedrock Knowledge Base retrieve-and-generate client."""

    def __init__(self, region: str, client=None):
        self.region = region
        self._client = client

    @property
    def client(self):
        """Lazily initialize the bedrock-agent-runtime client."""
        if self._client is None:
            logger.info(f"Initializing Bedrock Agent Runtime client in region: {self.region}")
            self._client = boto3.client("bedrock-agent-runtime", region_name=self.region)
        return self._client

    @staticmethod
    def build_request(prompt: str, record: RequestRecord) -> dict:
        return {
            "input": {"text": prompt},
            "retrieveAndGenerateConfiguration": {
                "type": "KNOWLEDGE_BASE",
                "knowledgeBaseConfiguration": {
                    "knowledgeBaseId": record.knowledge_base_id,
                    "modelArn": record.model_id,
                    "retrievalConfiguration": {
                        "vectorSearchConfiguration": {
                            "numberOfResults": record.number_of_results,
                            "overrideSearchType": record.search_type,
                        }
                    },
                    "generationConfiguration": {
                        "inferenceConfig": {
                            "textInferenceConfig": {
                                "maxTokens": record.max_tokens,
                                "temperature": record.temperature,
                                "topP": record.top_p,
                            }
                        }
                    },
                },
            },
        }

    def generate(self, prompt: str, record: RequestRecord) -> GenerationResult:
        logger.info(
            f"Querying knowledge base {record.knowledge_base_id} with model {record.model_id}"
        )

        try:
            response = self.client.retrieve_and_generate(**self.build_request(prompt, record))
        except ClientError as e:
            logger.error(f"Bedrock retrieve_and_generate error: {e}")
            raise

        logger.info("Response generated successfully")
        return GenerationResult(
            generated_text=response["output"]["text"],
            session_id=response.get("sessionId"),
            knowledge_base_id=record.knowledge_base_id,
            model_id=record.model_id,
            search_type=record.search_type,
            number_of_results=record.number_of_results,
            max_tokens=record.max_tokens,
            temperature=record.temperature,
            top_p=record.top_p,
        )
