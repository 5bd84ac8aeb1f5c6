# src/ingestor/process_csv.py
import enum, logging
from functools import lru_cache
from urllib.parse import unquote_plus

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from customers import handlers as customers
from customers.store import CustomerTable
from ingest_common.config import Settings
from ingest_common.errors import FetchError, PublishError, StoreError, UnrecognizedInput
from ingest_common.log import configure_logging
from ingestor.csv_rows import read_rows
from items import handlers as items
from notify.queue import QueueSink
from orders import handlers as orders

logger = logging.getLogger(__name__)


class Stage(enum.IntEnum):
    # Value order is dispatch order within a batch.
    CUSTOMERS = 0
    ORDERS = 1
    ITEMS = 2
    UNRECOGNIZED = 3


PREFIXES = (
    (Stage.CUSTOMERS, "customers"),
    (Stage.ORDERS, "orders"),
    (Stage.ITEMS, "items"),
)

REDUCERS = {
    Stage.CUSTOMERS: (customers.WIDTH, customers.process_customers),
    Stage.ORDERS: (orders.WIDTH, orders.process_orders),
    Stage.ITEMS: (items.WIDTH, items.process_items),
}


def classify(key):
    name = key.rsplit("/", 1)[-1]
    for stage, prefix in PREFIXES:
        if name.startswith(prefix + "_") or name == prefix + ".csv":
            return stage
    return Stage.UNRECOGNIZED


def parse_event(event, default_bucket=""):
    """Return the (bucket, key) pairs of an S3 notification, in delivery order."""
    pairs = []
    for record in event.get("Records") or []:
        rec = record.get("s3") or {}
        bucket = (rec.get("bucket") or {}).get("name") or default_bucket
        key = unquote_plus((rec.get("object") or {}).get("key") or "")
        if not key:
            logger.warning("S3 record without object key ignored: %s", record)
            continue
        pairs.append((bucket, key))
    return pairs


class Dispatcher:
    """Routes each file of a batch to its reducer and fans out after item files.

    Every failure is contained to the row or file it happened in; ``run``
    always attempts every file it is given.
    """

    def __init__(self, s3, store, sink, has_header=True):
        self.s3 = s3
        self.store = store
        self.sink = sink
        self.has_header = has_header
        self.diagnostics = 0

    def run(self, records):
        self.diagnostics = 0
        rows, published = {}, 0
        # Stable: files of one stage keep delivery order.
        for bucket, key in sorted(records, key=lambda pair: classify(pair[1])):
            result, sent = self.process_file(bucket, key)
            if result is not None:
                tally = rows.setdefault(result.stage, {"applied": 0, "skipped": 0})
                for name, count in result.as_dict().items():
                    tally[name] += count
            published += sent
        return {
            "ok": True,
            "files": len(records),
            "rows": rows,
            "published": published,
            "diagnostics": self.diagnostics,
        }

    def process_file(self, bucket, key):
        """Apply one file. Returns (StageResult or None, messages published)."""
        stage = classify(key)
        if stage is Stage.UNRECOGNIZED:
            err = UnrecognizedInput(f"Unexpected file: {key}")
            logger.warning("%s", err)
            self._report(str(err))
            return None, 0

        width, process = REDUCERS[stage]
        logger.info("Processing s3://%s/%s as %s", bucket, key, stage.name.lower())
        try:
            obj = self.s3.get_object(Bucket=bucket, Key=key)
            lines = obj["Body"].iter_lines(keepends=True)
            result = process(read_rows(lines, width=width, has_header=self.has_header, source=key),
                             self.store, key)
        except (ClientError, BotoCoreError) as exc:
            err = FetchError(f"Failed to download file: {key}: {exc}")
            logger.error("%s", err)
            self._report(str(err))
            return None, 0

        sent = self.publish_customers() if stage is Stage.ITEMS else 0
        return result, sent

    def publish_customers(self):
        try:
            snapshot = self.store.scan_all()
        except StoreError as exc:
            logger.error("Failed to retrieve customers: %s", exc)
            return 0
        sent = 0
        for customer in snapshot:
            try:
                self.sink.publish(customer.to_message())
            except PublishError as exc:
                logger.error("Failed to send customer %s: %s", customer.id, exc)
                continue
            sent += 1
            logger.info("Sent customer %s", customer.id)
        return sent

    def _report(self, message):
        self.diagnostics += 1
        self.sink.report(message)


@lru_cache(maxsize=1)
def _settings():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info("table=%s queue=%s bucket=%s", settings.table_name, settings.queue_url,
                settings.source_bucket)
    return settings


@lru_cache(maxsize=1)
def _dispatcher():
    settings = _settings()
    return Dispatcher(
        s3=boto3.client("s3"),
        store=CustomerTable.from_settings(settings),
        sink=QueueSink.from_settings(settings),
        has_header=settings.has_header,
    )


def handler(event, context):
    records = parse_event(event, _settings().source_bucket)
    return _dispatcher().run(records)
