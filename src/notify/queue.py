# src/notify/queue.py
import json, logging
from decimal import Decimal

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ingest_common.errors import PublishError

logger = logging.getLogger(__name__)


def _json_default(value):
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


class QueueSink:
    """Fire-and-forget publisher for aggregates and diagnostics."""

    def __init__(self, sqs, queue_url):
        self._sqs = sqs
        self._queue_url = queue_url

    @classmethod
    def from_settings(cls, settings):
        return cls(boto3.client("sqs"), settings.queue_url)

    def publish(self, payload):
        body = payload if isinstance(payload, str) else json.dumps(payload, default=_json_default)
        try:
            self._sqs.send_message(QueueUrl=self._queue_url, MessageBody=body)
        except (ClientError, BotoCoreError) as exc:
            raise PublishError(f"send to {self._queue_url} failed: {exc}") from exc

    def report(self, message):
        """Publish a diagnostic; a failure here is only logged."""
        try:
            self.publish(message)
        except PublishError as exc:
            logger.error("Failed to send error message %r: %s", message, exc)
            return False
        return True
