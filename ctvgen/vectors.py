"""Test vector assembly and JSON output.

The output file is a JSON array whose first element is a documentation
string and whose remaining elements are test vector objects.
"""

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import attr
from bitcointx.core import CTransaction, b2lx

from ctvgen.generator import generate_checked
from ctvgen.sink import OutputDestination
from ctvgen.stream import RandomStream
from ctvgen.util import class_logger

DOCUMENTATION = (
    '{"hex_tx":string (hex tx), "spend_index":[number], '
    '"result": [string (hex hash)]}'
)

# (hex_tx, input index, witness mode) -> hex template hash
Oracle_Type = Callable[[str, int, bool], str]


@attr.s(slots=True, frozen=True)
class Desc:
    """Shape summary of a generated transaction."""
    inputs = attr.ib()  # type: int
    outputs = attr.ib()  # type: int
    witness = attr.ib()  # type: bool
    version = attr.ib()  # type: int
    script_sigs = attr.ib()  # type: bool

    def to_json(self) -> Dict[str, Any]:
        return {
            'Inputs': self.inputs,
            'Outputs': self.outputs,
            'Witness': self.witness,
            'Version': self.version,
            'scriptSigs': self.script_sigs,
        }


@attr.s(slots=True, frozen=True)
class Documentation:
    text = attr.ib()  # type: str

    def to_json(self) -> str:
        return self.text


@attr.s(slots=True, frozen=True)
class CtvTestVector:
    hex_tx = attr.ib()  # type: str
    spend_index = attr.ib(converter=tuple)  # type: Tuple[int, ...]
    result = attr.ib(converter=tuple)  # type: Tuple[str, ...]  # one per spend index
    desc = attr.ib()  # type: Desc

    def __attrs_post_init__(self) -> None:
        if len(self.spend_index) != len(self.result):
            raise ValueError(
                f'{len(self.spend_index)} spend indices but '
                f'{len(self.result)} results')

    def to_json(self) -> Dict[str, Any]:
        return {
            'hex_tx': self.hex_tx,
            'spend_index': list(self.spend_index),
            'result': list(self.result),
            'desc': self.desc.to_json(),
        }


TestVectorEntry = Union[Documentation, CtvTestVector]


def describe(tx: CTransaction) -> Desc:
    return Desc(
        inputs=len(tx.vin),
        outputs=len(tx.vout),
        witness=any(not w.is_null() for w in tx.wit.vtxinwit),
        version=tx.nVersion,
        script_sigs=any(len(txin.scriptSig) > 0 for txin in tx.vin),
    )


def draw_spend_indices(stream: RandomStream) -> Tuple[int, ...]:
    """Indices 0 and 1, plus two drawn from the full 32-bit range.

    The drawn indices usually point past the last input.
    """
    return (0, 1, stream.next_u32(), stream.next_u32())


def build_test_vector(tx: CTransaction, hex_tx: str,
                      spend_index: Tuple[int, ...],
                      oracle: Oracle_Type) -> CtvTestVector:
    desc = describe(tx)
    result = tuple(oracle(hex_tx, i, desc.witness) for i in spend_index)
    return CtvTestVector(hex_tx, spend_index, result, desc)


def generate_test_vectors(stream: RandomStream, oracle: Oracle_Type,
                          count: int) -> List[TestVectorEntry]:
    """Generate count test vectors, preceded by the documentation entry.

    Every transaction is round-trip checked before the oracle is asked
    about it.  Any error aborts the whole batch.
    """
    logger = class_logger(__name__, 'generate_test_vectors')
    entries: List[TestVectorEntry] = [Documentation(DOCUMENTATION)]

    for n in range(count):
        tx, hex_tx = generate_checked(stream)
        spend_index = draw_spend_indices(stream)
        vector = build_test_vector(tx, hex_tx, spend_index, oracle)
        d = vector.desc
        logger.debug(f'tx #{n} {b2lx(tx.GetTxid())}: {d.inputs} inputs, '
                     f'{d.outputs} outputs, '
                     f'witness={d.witness}, version={d.version}, '
                     f'{len(hex_tx) // 2:,d} bytes')
        entries.append(vector)

    return entries


def entries_to_json(entries: List[TestVectorEntry]) -> List[Any]:
    return [entry.to_json() for entry in entries]


def write_entries(dest: OutputDestination,
                  entries: List[TestVectorEntry]) -> None:
    json.dump(entries_to_json(entries), dest, indent=2)
    dest.write('\n')
    dest.flush()


__all__ = (
    'DOCUMENTATION',
    'Desc',
    'Documentation',
    'CtvTestVector',
    'TestVectorEntry',
    'describe',
    'draw_spend_indices',
    'build_test_vector',
    'generate_test_vectors',
    'entries_to_json',
    'write_entries',
)
