import copy
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT / "src", ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

import pytest
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError

from customers.store import CustomerTable
from ingestor.process_csv import Dispatcher
from notify.queue import QueueSink

QUEUE_URL = "https://sqs.eu-west-1.amazonaws.com/000000000000/customers"


def client_error(operation, code="InternalServerError"):
    return ClientError({"Error": {"Code": code, "Message": f"{operation} boom"}}, operation)


class FakeTable:
    """Just enough of a boto3 DynamoDB Table resource, keyed on ID."""

    def __init__(self, page_size=100):
        self.items = {}
        self.page_size = page_size
        self.fail_put_ids = set()
        self.fail_get = False
        self.fail_scan = False
        self.puts = 0
        self.scans = 0

    def get_item(self, Key, ConsistentRead=False):
        if self.fail_get:
            raise client_error("GetItem")
        item = self.items.get(Key["ID"])
        return {"Item": copy.deepcopy(item)} if item is not None else {}

    def put_item(self, Item):
        if Item["ID"] in self.fail_put_ids:
            raise client_error("PutItem")
        # Rejects what the real resource would, e.g. numbers past 38 digits.
        TypeSerializer().serialize(Item)
        self.puts += 1
        self.items[Item["ID"]] = copy.deepcopy(Item)
        return {}

    def scan(self, ExclusiveStartKey=None):
        if self.fail_scan:
            raise client_error("Scan")
        self.scans += 1
        keys = list(self.items)
        start = keys.index(ExclusiveStartKey["ID"]) + 1 if ExclusiveStartKey else 0
        page = keys[start:start + self.page_size]
        res = {"Items": [copy.deepcopy(self.items[k]) for k in page], "Count": len(page)}
        if start + self.page_size < len(keys):
            res["LastEvaluatedKey"] = {"ID": page[-1]}
        return res


class FakeSQS:
    def __init__(self):
        self.messages = []
        self.fail_when = lambda body: False

    def send_message(self, QueueUrl, MessageBody):
        if self.fail_when(MessageBody):
            raise client_error("SendMessage")
        self.messages.append(MessageBody)
        return {"MessageId": str(len(self.messages))}


class FakeBody:
    def __init__(self, data, error=None):
        self._data = data
        self._error = error

    def iter_lines(self, chunk_size=1024, keepends=False):
        yield from self._data.splitlines(keepends=keepends)
        if self._error is not None:
            raise self._error


class FakeS3:
    def __init__(self):
        self.objects = {}
        self.errors = {}
        self.fetched = []

    def put(self, key, text, error=None):
        self.objects[key] = text.encode("utf-8") if isinstance(text, str) else text
        if error is not None:
            self.errors[key] = error

    def get_object(self, Bucket, Key):
        self.fetched.append(Key)
        if Key not in self.objects:
            raise client_error("GetObject", code="NoSuchKey")
        return {"Body": FakeBody(self.objects[Key], self.errors.get(Key))}


@pytest.fixture
def table():
    return FakeTable()


@pytest.fixture
def store(table):
    return CustomerTable(table)


@pytest.fixture
def sqs():
    return FakeSQS()


@pytest.fixture
def sink(sqs):
    return QueueSink(sqs, QUEUE_URL)


@pytest.fixture
def s3():
    return FakeS3()


@pytest.fixture
def dispatcher(s3, store, sink):
    return Dispatcher(s3=s3, store=store, sink=sink)
