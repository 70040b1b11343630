#!/usr/bin/env python3
"""
Simple demo of the object-store write-ahead log.

Runs against an in-memory store by default. Set S3_ENDPOINT_URL (and the
usual AWS credential variables) to run against MinIO or S3 instead; the
bucket named by WAL_BUCKET must already exist.
"""

import os

from s3wal import InMemoryObjectStore, S3ObjectStore, WriteAheadLog, WriteConflict
from s3wal.utils.config import WALConfig, get_config
from s3wal.utils.logging import configure_logging_from_config


def main():
    config = get_config()
    configure_logging_from_config(config)
    settings = WALConfig.from_config(config)
    
    if os.getenv("S3_ENDPOINT_URL"):
        store = S3ObjectStore.from_config(settings)
    else:
        store = InMemoryObjectStore()
    
    print("=" * 60)
    print("s3wal - Write-Ahead Log Demo")
    print("=" * 60)
    
    wal = WriteAheadLog(store, settings.bucket, settings.prefix)
    print(f"\n[1] Opened log at {settings.bucket}/{settings.prefix}, tail={wal.latest_offset()}")
    
    print("\n[2] Appending 3 records...")
    for payload in (b"a", b"b", b"c"):
        offset = wal.append(payload)
        print(f"  appended {payload!r} at offset {offset}")
    
    print("\n[3] Simulating a restart...")
    restarted = WriteAheadLog(store, settings.bucket, settings.prefix)
    last = restarted.last_record()
    print(f"  last record: offset={last.offset}, payload={last.payload!r}")
    
    print("\n[4] Appending from a stale writer...")
    stale = WriteAheadLog(store, settings.bucket, settings.prefix, recover=False)
    try:
        stale.append(b"stale")
    except WriteConflict as e:
        print(f"  rejected: {e}")
    
    print("\n[5] Replaying the log...")
    for record in restarted.replay():
        print(f"  {record.offset}: {record.payload!r}")


if __name__ == "__main__":
    main()
