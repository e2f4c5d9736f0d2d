"""Export one wallet's history as a tax CSV.

Usage:
    PYTHONPATH=src python scripts/export_wallet.py CHAIN ADDRESS [OUTPUT]

API keys come from WALLETEXPORT_* environment variables or .env.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


async def main(chain: str, address: str, output: str | None) -> int:
    from walletexport.container import Container
    from walletexport.exceptions import WalletExportError

    container = Container()
    exporter = container.exporter()

    def progress(count: int, page: int) -> None:
        print(f"\r  {count} records / {page} pages", end="", flush=True)

    async with exporter:
        try:
            result = await exporter.export(chain, address, on_progress=progress)
        except WalletExportError as exc:
            print(f"\nError: {exc}", file=sys.stderr)
            return 1
    print()

    meta = result.metadata
    path = Path(output or result.filename)
    path.write_text(result.csv, encoding="utf-8")
    print(f"Source:   {meta.data_source}")
    print(f"Fetched:  {meta.total_fetched} transactions ({meta.dropped_count} dropped)")
    if meta.first_transaction_date and meta.last_transaction_date:
        print(f"Range:    {meta.first_transaction_date:%Y-%m-%d} -> {meta.last_transaction_date:%Y-%m-%d}")
    for branch in meta.branches:
        suffix = f"  ({branch.error})" if branch.error else ""
        print(f"  {branch.name:<24} {branch.status.value:<10} {branch.records:>6} records{suffix}")
    if not meta.complete:
        print("WARNING: history is incomplete, some branches did not finish")
    print(f"Wrote {len(result.rows)} rows to {path}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("chain", help="osmosis, celestia, celo, ronin, tezos, near or fantom")
    parser.add_argument("address")
    parser.add_argument("output", nargs="?")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.chain, args.address, args.output)))
