"""
Delete photo files that no inventory item references.

Orphans are left behind when a photo replacement or item delete is interrupted
between the database write and the file cleanup. Run while the API is idle:
  PYTHONPATH=backend CACHE_DIR=/path/to/cache python backend/scripts/sweep_orphans.py
"""

from __future__ import annotations

import argparse
import asyncio

from core.config import Settings
from core.context import StoreContext


async def main(cache_dir: str | None = None, dry_run: bool = False) -> None:
    store = StoreContext.from_settings(Settings(cache_dir=cache_dir))
    await store.start()
    try:
        if dry_run:
            referenced = await store.repository.referenced_refs()
            orphans = [ref for ref in store.attachments.list_refs() if ref not in referenced]
            print(f"[sweep_orphans] would remove {len(orphans)} file(s)")
            for ref in orphans:
                print(f"  {ref}")
            return
        removed = await store.service.sweep_orphans()
        print(f"[sweep_orphans] removed={len(removed)}")
    finally:
        await store.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("-c", "--cache", help="Photo directory (default: $CACHE_DIR)")
    parser.add_argument("--dry-run", action="store_true", help="List orphans without deleting them")
    args = parser.parse_args()
    asyncio.run(main(args.cache, args.dry_run))
