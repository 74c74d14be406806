# takoyaki/decode/instructions.py

from typing import Dict, List, Tuple, Iterable, Union

from ..types import (
    RawInstruction,
    RawTransaction,
    CompiledInstruction,
    InnerInstruction,
    DanglingReferenceError,
)
from .address_resolver import AddressResolver, TransactionLookup


TopLevelInstructions = Dict[int, List[CompiledInstruction]]
InnerInstructions = Dict[int, List[InnerInstruction]]


def compile_instruction(instruction: RawInstruction, resolver: AddressResolver) -> CompiledInstruction:
    """Swap the instruction's addresses for indices into the transaction's account keys"""
    return CompiledInstruction(
        program_id_index=resolver.resolve(instruction.program_id),
        accounts=[resolver.resolve(account) for account in instruction.accounts],
        data=instruction.data,
    )


def group_instructions(
    instructions: Iterable[RawInstruction],
    transactions: Union[TransactionLookup, Iterable[RawTransaction]],
) -> Tuple[TopLevelInstructions, InnerInstructions]:
    """
    Split flat instruction records into top level and inner instructions per transaction.

    An instruction address of length 1 is a top level instruction. Anything
    longer is an inner instruction of the top level instruction at
    address[0]. Deeper call levels are not distinguished, they land in the
    same inner group in the order they were seen.
    """
    lookup = TransactionLookup.of(transactions)

    top_level: Dict[int, List[Tuple[int, CompiledInstruction]]] = {}
    inner_groups: Dict[int, Dict[int, InnerInstruction]] = {}

    for instruction in instructions:
        tx_index = instruction.transaction_index
        address = instruction.instruction_address
        if not address:
            raise DanglingReferenceError(
                "Instruction has an empty instruction address",
                tx_index=tx_index,
                program_id=instruction.program_id,
            )

        resolver = lookup.resolver(tx_index, "instruction")
        compiled = compile_instruction(instruction, resolver)

        if len(address) == 1:
            top_level.setdefault(tx_index, []).append((address[0], compiled))
            continue

        groups = inner_groups.setdefault(tx_index, {})
        group = groups.get(address[0])
        if group is None:
            group = InnerInstruction(index=address[0], instructions=[])
            groups[address[0]] = group
        group.instructions.append(compiled)

    # The archive already returns program order, the stable sort keeps it when it does
    ordered_top_level = {
        tx_index: [compiled for _, compiled in sorted(entries, key=lambda entry: entry[0])]
        for tx_index, entries in top_level.items()
    }
    inner = {tx_index: list(groups.values()) for tx_index, groups in inner_groups.items()}

    return ordered_top_level, inner


def count_instructions(top_level: TopLevelInstructions, inner: InnerInstructions) -> int:
    total = sum(len(instructions) for instructions in top_level.values())
    total += sum(len(group.instructions) for groups in inner.values() for group in groups)
    return total
