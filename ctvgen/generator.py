"""Random transaction generation.

Transactions are structurally arbitrary but always decodable: version and
lock time take any 32-bit value, input and output counts span their full
ranges, and scripts and witness items are filled with random bytes under a
per-transaction byte budget.
"""

import struct
from typing import List, Tuple

from bitcointx.core import (
    CoreCoinParams, COutPoint, CTxIn, CTxOut, CTxInWitness, CTxWitness,
    CTransaction, b2x, x
)
from bitcointx.core.script import CScript, CScriptWitness
from bitcointx.core.serialize import Hash, SerializationError

from ctvgen.budget import (
    LengthRange, ByteBudget, random_range, random_bytes_lt
)
from ctvgen.stream import RandomStream

INPUT_COUNT = LengthRange(1, 129)
OUTPUT_COUNT = LengthRange(0, 129)

SCRIPT_PUBKEY_LENGTH = LengthRange(0, 129)
SCRIPT_SIG_LENGTH = LengthRange(0, 129)
WITNESS_LENGTH = LengthRange(0, 129)
WITNESS_ITEM_LENGTH = LengthRange(0, 520)

# Approximate; compact-size length prefixes are not accounted for.
RANDOM_BYTES_COUNT = LengthRange(0, 10000)

# txid + vout
OUTPOINT_SIZE = 36


class RoundTripError(Exception):
    """A generated transaction did not survive encode/decode."""


def _as_int32(value: int) -> int:
    return struct.unpack(b'<i', struct.pack(b'<I', value))[0]


def random_witness_item(stream: RandomStream, budget: ByteBudget) -> bytes:
    return random_bytes_lt(stream, WITNESS_ITEM_LENGTH, budget)


def random_witness(stream: RandomStream,
                   budget: ByteBudget) -> CScriptWitness:
    items: List[bytes] = []
    for _ in range(random_range(stream, WITNESS_LENGTH)):
        items.append(random_witness_item(stream, budget))
        if budget.is_exhausted():
            break
    return CScriptWitness(items)


def random_tx(stream: RandomStream) -> CTransaction:
    """Generate one random transaction from the stream.

    The draw order is fixed: version, lock time, input count, output
    count, byte budget, witness flag, then inputs and outputs.  Once the
    budget runs out, the input and output loops stop early, so the result
    may have fewer inputs and outputs than were drawn.

    When the witness flag is set, every input gets a witness stack and a
    scriptSig draw, so both may be non-empty on the same input. Otherwise
    every scriptSig and witness is empty.

    A transaction whose witness stacks all came out empty gets no witness
    at all, which is also how its legacy encoding decodes.
    """
    nVersion = _as_int32(stream.next_u32())
    nLockTime = stream.next_u32()

    input_count = random_range(stream, INPUT_COUNT)
    output_count = random_range(stream, OUTPUT_COUNT)

    budget = ByteBudget(random_range(stream, RANDOM_BYTES_COUNT))

    has_witness = (stream.next_u32() % 2) == 1

    vin: List[CTxIn] = []
    vtxinwit: List[CTxInWitness] = []
    for _ in range(input_count):
        prevout = COutPoint(Hash(stream.fill_bytes(32)), stream.next_u32())

        budget.charge(OUTPOINT_SIZE)

        if has_witness:
            witness = random_witness(stream, budget)
            scriptSig = CScript(
                random_bytes_lt(stream, SCRIPT_SIG_LENGTH, budget))
        else:
            witness = CScriptWitness()
            scriptSig = CScript()

        vin.append(CTxIn(prevout, scriptSig, stream.next_u32()))
        vtxinwit.append(CTxInWitness(witness))

        if budget.is_exhausted():
            break

    sats_modulus = CoreCoinParams.MAX_MONEY + 1
    vout: List[CTxOut] = []
    for _ in range(output_count):
        nValue = stream.next_u64() % sats_modulus
        scriptPubKey = CScript(
            random_bytes_lt(stream, SCRIPT_PUBKEY_LENGTH, budget))
        vout.append(CTxOut(nValue, scriptPubKey))

        if budget.is_exhausted():
            break

    wit = CTxWitness(vtxinwit)
    return CTransaction(vin, vout, nLockTime, nVersion,
                        witness=None if wit.is_null() else wit)


def check_roundtrip(tx: CTransaction) -> str:
    """Encode tx to hex and decode it back, returning the hex.

    Raises RoundTripError if decoding fails or yields a different
    transaction.
    """
    hex_tx = b2x(tx.serialize())
    try:
        decoded = CTransaction.deserialize(x(hex_tx))
    except (SerializationError, ValueError) as e:
        raise RoundTripError(
            f'generated transaction does not decode: {e}') from e
    if (decoded != tx or decoded.vin != tx.vin or decoded.vout != tx.vout
            or decoded.wit.vtxinwit != tx.wit.vtxinwit):
        raise RoundTripError(
            f'generated transaction changed in round trip: {hex_tx}')
    return hex_tx


def generate_checked(stream: RandomStream) -> Tuple[CTransaction, str]:
    """Generate a transaction and return it with its verified hex."""
    tx = random_tx(stream)
    return tx, check_roundtrip(tx)


__all__ = (
    'INPUT_COUNT',
    'OUTPUT_COUNT',
    'SCRIPT_PUBKEY_LENGTH',
    'SCRIPT_SIG_LENGTH',
    'WITNESS_LENGTH',
    'WITNESS_ITEM_LENGTH',
    'RANDOM_BYTES_COUNT',
    'OUTPOINT_SIZE',
    'RoundTripError',
    'random_witness_item',
    'random_witness',
    'random_tx',
    'check_roundtrip',
    'generate_checked',
)
