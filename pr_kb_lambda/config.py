"""
Handler Configuration
---------------------
Deployment settings for the knowledge-base query Lambda. Every value can be
overridden through environment variables; the handler receives one
``HandlerConfig`` instance when it is built.
"""

import os
from enum import Enum
from dataclasses import dataclass


class Variant(Enum):
    """Deployment variants of the handler."""
    KNOWLEDGE_BASE = "knowledge_base"  # Full knowledge-base answer
    TEST_CASES = "test_cases"          # Mobile QA test-case artifact


DEFAULT_MODEL_ID = "anthropic.claude-3-5-sonnet-20241022-v2:0"
DEFAULT_KNOWLEDGE_BASE_ID = "ZEVRTT7CCF"

# Retrieval / generation tuning defaults
DEFAULT_NUMBER_OF_RESULTS = 5
DEFAULT_SEARCH_TYPE = "HYBRID"
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.9


@dataclass
class HandlerConfig:
    """Knowledge-base query handler settings."""
    
    # AWS Settings
    aws_region: str = "us-west-2"
    
    # Bedrock Settings
    model_id: str = DEFAULT_MODEL_ID
    knowledge_base_id: str = DEFAULT_KNOWLEDGE_BASE_ID
    
    # S3 Settings
    bucket: str = "closedaioutput"
    presigned_url_expiry: int = 86400  # 24 hours
    
    # Local scratch space (only /tmp is writable in Lambda)
    tmp_dir: str = "/tmp"
    
    # Deployment variant
    variant: Variant = Variant.KNOWLEDGE_BASE
    
    # Test-case artifact settings
    app_package: str = "com.example.mobileapp"
    
    @classmethod
    def from_env(cls, environ=None) -> "HandlerConfig":
        """Build a config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            aws_region=env.get("AWS_REGION", defaults.aws_region),
            model_id=env.get("MODEL_ID", defaults.model_id),
            knowledge_base_id=env.get("KNOWLEDGE_BASE_ID", defaults.knowledge_base_id),
            bucket=env.get("S3_BUCKET", defaults.bucket),
            presigned_url_expiry=int(
                env.get("PRESIGNED_URL_EXPIRY", defaults.presigned_url_expiry)
            ),
            tmp_dir=env.get("TMP_DIR", defaults.tmp_dir),
            variant=Variant(env.get("HANDLER_VARIANT", defaults.variant.value)),
            app_package=env.get("APP_PACKAGE", defaults.app_package),
        )
