"""
mydata — Quickstart

Records live under a namespace.  The repository assigns identifiers,
PUT-style updates create missing records, deletes report what they removed.
"""

import asyncio
import tempfile

from mydata import FileRepository


async def main():
    # ──────────────────────────────────────
    #  1. Create the repository
    # ──────────────────────────────────────
    location = tempfile.mkdtemp(prefix="mydata-")
    repo = FileRepository(location)

    # ──────────────────────────────────────
    #  2. Push, update and delete records
    # ──────────────────────────────────────
    pen = await repo.create("orders", {"item": "pen"})
    print(f"  created    id={pen}")

    created = await repo.update("orders", pen, {"item": "pencil"})
    print(f"  update     id={pen} created={created}")

    created = await repo.update("orders", "10", {"item": "ink"})
    print(f"  update     id=10 created={created}")

    print(f"  next id    {await repo.create('orders', {'item': 'paper'})}")

    print(f"  delete     id={pen} -> {await repo.delete('orders', pen)}")
    print(f"  delete     id={pen} -> {await repo.delete('orders', pen)}")

    # ──────────────────────────────────────
    #  3. A fresh repository reloads what was persisted
    # ──────────────────────────────────────
    reloaded = FileRepository(location)
    for record in await reloaded.read("orders"):
        print(f"  stored     {record}")


if __name__ == "__main__":
    asyncio.run(main())
