"""
Declarative table of urchain indexer endpoints.

Each entry maps an accessor name to its HTTP verb, endpoint path and the
payload fields drawn from the accessor's keyword arguments. The client builds
request payloads from this table; no endpoint carries logic of its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

GET = "GET"
POST = "POST"


@dataclass(frozen=True, slots=True)
class Field:
    name: str
    wire_name: str
    optional: bool = False


@dataclass(frozen=True, slots=True)
class Endpoint:
    name: str
    verb: str
    path: str
    fields: Tuple[Field, ...] = ()

    def build_payload(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        """Map accessor keyword arguments onto wire field names."""
        known = {f.name for f in self.fields}
        unexpected = sorted(set(arguments) - known)
        if unexpected:
            raise TypeError(f"{self.name}() got unexpected arguments: {', '.join(unexpected)}")
        payload: Dict[str, Any] = {}
        for f in self.fields:
            if f.name not in arguments:
                if f.optional:
                    continue
                raise TypeError(f"{self.name}() missing required argument: {f.name!r}")
            value = arguments[f.name]
            if value is None and f.optional:
                continue
            payload[f.wire_name] = value
        return payload


def _endpoint(name: str, verb: str, path: str, *fields: Field) -> Tuple[str, Endpoint]:
    return name, Endpoint(name=name, verb=verb, path=path, fields=tuple(fields))


SCRIPT_HASH = Field("script_hash", "scriptHash")
TICK = Field("tick", "tick")
TX_ID = Field("tx_id", "txId")

ENDPOINTS: Dict[str, Endpoint] = dict(
    [
        _endpoint("health", GET, "health"),
        _endpoint("get_fee_per_kb", GET, "fees"),
        _endpoint("balance", POST, "balance", SCRIPT_HASH),
        _endpoint("token_balance", POST, "token-balance", SCRIPT_HASH, TICK),
        _endpoint("token_list", POST, "token-list", SCRIPT_HASH),
        _endpoint(
            "utxos",
            POST,
            "utxos",
            Field("script_hashes", "scriptHashs"),
            Field("satoshis", "satoshis", optional=True),
        ),
        _endpoint("tx", POST, "tx", TX_ID),
        _endpoint("refresh", POST, "fetch-history", SCRIPT_HASH),
        _endpoint("reset", POST, "reset", SCRIPT_HASH),
        _endpoint("txo", POST, "txo", TX_ID, Field("output_index", "outputIndex")),
        _endpoint("txos", POST, "txos", Field("address", "address"), Field("type", "type")),
        _endpoint("broadcast", POST, "broadcast", Field("raw_hex", "rawHex")),
        _endpoint("best_block", POST, "best-header"),
        _endpoint("all_tokens", POST, "all-n20-tokens"),
        _endpoint("token_info", POST, "token-info", TICK),
    ]
)
