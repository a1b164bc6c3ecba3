"""Minimal sanity checks against a live urchain indexer."""

from __future__ import annotations

import asyncio
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from urchain_rpc.config import default_config  # noqa: E402
from urchain_rpc.logging_config import configure_logging  # noqa: E402
from urchain_rpc.metrics import MetricsRecorder  # noqa: E402
from urchain_rpc.observability import CompositeObserver, LoggingObserver  # noqa: E402
from urchain_rpc.urchain_api import UrchainClient  # noqa: E402

# Optional script hash for balance/UTXO lookups; skipped when unset.
SAMPLE_SCRIPT_HASH = os.getenv("URCHAIN_SAMPLE_SCRIPT_HASH")
# Optional token tick for token-info lookup.
SAMPLE_TICK = os.getenv("URCHAIN_SAMPLE_TICK")
# Keep the sanity run short; the library default retries for over an hour.
SANITY_MAX_ATTEMPTS = int(os.getenv("URCHAIN_SANITY_MAX_ATTEMPTS", "3"))
SANITY_DELAY_MS = int(os.getenv("URCHAIN_SANITY_DELAY_MS", "1000"))


async def main() -> None:
    configure_logging(default_config)
    metrics = MetricsRecorder()
    options = {"max_attempts": SANITY_MAX_ATTEMPTS, "delay_ms": SANITY_DELAY_MS}
    async with UrchainClient(observer=CompositeObserver([LoggingObserver(), metrics])) as client:
        print("Health:", await client.health(**options))
        print("Fees:", await client.get_fee_per_kb(**options))
        print("Best block:", await client.best_block(**options))

        if SAMPLE_SCRIPT_HASH:
            print("Balance:", await client.balance(SAMPLE_SCRIPT_HASH, **options))
            print("UTXOs:", await client.utxos([SAMPLE_SCRIPT_HASH], **options))
            print("Tokens:", await client.token_list(SAMPLE_SCRIPT_HASH, **options))

        if SAMPLE_TICK:
            print("Token info:", await client.token_info(SAMPLE_TICK, **options))

    print("Metrics:", metrics.snapshot())


if __name__ == "__main__":
    asyncio.run(main())
