# src/ingest_common/config.py
import os
from dataclasses import dataclass

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    table_name: str
    queue_url: str
    source_bucket: str
    has_header: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            table_name=os.getenv("DYNAMODB_TABLE", ""),
            queue_url=os.getenv("SQS_QUEUE", ""),
            source_bucket=os.getenv("S3_BUCKET", ""),
            has_header=os.getenv("CSV_HAS_HEADER", "true").strip().lower() in _TRUTHY,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
