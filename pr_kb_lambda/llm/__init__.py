from .base import GenerationClient
from .bedrock_kb_client import BedrockKnowledgeBaseClient

__all__ = ["GenerationClient", "BedrockKnowledgeBaseClient"]
