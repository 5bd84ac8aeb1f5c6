"""Re-run a batch by hand: build an S3 notification for KEYs and invoke the handler.

    python run.py customers_0001.csv orders_0001.csv items_0001.csv
    python run.py --bucket my-drop-bucket --dry-run items_0002.csv
"""
import argparse, json, pathlib, sys

from dotenv import load_dotenv

ROOT = pathlib.Path(__file__).resolve().parent
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from ingest_common.config import Settings  # noqa: E402
from ingestor import process_csv  # noqa: E402


def build_event(bucket, keys):
    return {
        "Records": [
            {"eventSource": "aws:s3", "s3": {"bucket": {"name": bucket}, "object": {"key": key}}}
            for key in keys
        ]
    }


def build_parser():
    parser = argparse.ArgumentParser(description="Replay CSV files through the batch handler")
    parser.add_argument("keys", nargs="+", help="Object keys, in delivery order.")
    parser.add_argument("--bucket", help="Source bucket (default: $S3_BUCKET).")
    parser.add_argument("--dry-run", action="store_true", help="Print the event and exit.")
    return parser


def main(argv=None):
    load_dotenv()
    args = build_parser().parse_args(argv)
    bucket = args.bucket or Settings.from_env().source_bucket
    if not bucket:
        print("No bucket: pass --bucket or set S3_BUCKET.", file=sys.stderr)
        return 2

    event = build_event(bucket, args.keys)
    if args.dry_run:
        print(json.dumps(event, indent=2))
        return 0

    summary = process_csv.handler(event, None)
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
