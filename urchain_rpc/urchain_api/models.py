"""Response shapes returned by the urchain indexer.

These are static typing aids only; responses are passed through as decoded JSON.
"""

from __future__ import annotations

from typing import List, TypedDict, Union


class Balance(TypedDict):
    confirmed: int
    unconfirmed: int


class Fees(TypedDict, total=False):
    fastestFee: int
    halfHourFee: int
    hourFee: int
    minimumFee: int


class Token(TypedDict, total=False):
    tick: str
    confirmed: int
    unconfirmed: int
    dec: int


class Utxo(TypedDict, total=False):
    txId: str
    outputIndex: int
    satoshis: int
    scriptHash: str
    height: int


class Transaction(TypedDict):
    txId: str
    height: int
    txHex: str
    address: str
    time: int
    blockHash: str
    blockTime: int
    indexInBlock: int


class HistoryResult(TypedDict):
    message: str
    code: Union[str, int]


class Txo(TypedDict, total=False):
    txId: str
    outputIndex: int
    satoshis: int
    address: str
    script: str
    spent: bool


class BroadcastResult(TypedDict, total=False):
    txId: str
    message: str
    code: Union[str, int]


class BlockHeader(TypedDict, total=False):
    height: int
    hash: str
    hex: str
    time: int


class TokenDirectoryEntry(TypedDict, total=False):
    tick: str
    max: int
    lim: int
    dec: int
    deployTxId: str


TokenList = List[Token]
UtxoList = List[Utxo]
TxoList = List[Txo]
TokenDirectory = List[TokenDirectoryEntry]
