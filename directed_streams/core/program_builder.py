# Copyright (c) 2024-2025 Institute of Information Engineering, Chinese Academy of Sciences
#
# DiveFuzz is licensed under Mulan PSL v2.
# You can use this software according to the terms and conditions of the Mulan PSL v2.
# You may obtain a copy of Mulan PSL v2 at:
#          http://license.coscl.org.cn/MulanPSL2
#
# THIS SOFTWARE IS PROVIDED ON AN "AS IS" BASIS, WITHOUT WARRANTIES OF ANY KIND,
# EITHER EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO NON-INFRINGEMENT,
# MERCHANTABILITY OR FIT FOR A PARTICULAR PURPOSE.
#
# See the Mulan PSL v2 for more details.

"""
Merges generated streams into one program body and renders it.

The body is a run of random filler instructions. Each stream is inserted at
a random point; a stream containing atomic instructions goes in as one
contiguous block, a stream of only non-atomic instructions is scattered with
its internal order kept.
"""

from collections import Counter
from typing import List, Sequence, Tuple

from ..asm_template_manager import AsmProgram, TemplateInstance
from ..asm_template_manager.riscv_asm_syntex import ArchConfig
from ..instr_generator.generator import generate_filler_instrs
from ..instr_generator.instruction import DirectedInstr
from ..instr_generator.randomizer import Randomizer
from ..instr_generator.variables import RegisterAllocation
from ..streams.base import StreamInvariantError

# (position in filler body, insertion order, instructions)
Piece = Tuple[int, int, List[DirectedInstr]]


def insert_streams(body: Sequence[DirectedInstr],
                   streams: Sequence[Sequence[DirectedInstr]],
                   rng: Randomizer) -> List[DirectedInstr]:
    """
    Return a new list with every stream inserted into `body`.
    """
    pieces: List[Piece] = []
    seq = 0
    for instrs in streams:
        if not instrs:
            continue
        if any(i.atomic for i in instrs):
            pieces.append((rng.randint(0, len(body)), seq, list(instrs)))
            seq += 1
            continue
        positions = sorted(rng.randint(0, len(body)) for _ in instrs)
        for pos, instr in zip(positions, instrs):
            pieces.append((pos, seq, [instr]))
            seq += 1

    pieces.sort(key=lambda p: (p[0], p[1]))
    result: List[DirectedInstr] = []
    it = iter(pieces)
    nxt = next(it, None)
    for idx in range(len(body) + 1):
        while nxt is not None and nxt[0] == idx:
            result.extend(nxt[2])
            nxt = next(it, None)
        if idx < len(body):
            result.append(body[idx])
    return result


def check_program_labels(instrs: Sequence[DirectedInstr]) -> None:
    """
    Labels must be unique across the merged program and every symbolic
    reference must name one of them.
    """
    counts = Counter(i.label for i in instrs if i.label)
    dupes = sorted(lbl for lbl, n in counts.items() if n > 1)
    if dupes:
        raise StreamInvariantError(f"labels defined more than once in program: {dupes}")
    for instr in instrs:
        ref = instr.symbolic_label()
        if ref is not None and ref not in counts:
            raise StreamInvariantError(f"'{instr.text()}' references undefined label '{ref}'")


def build_main_body(instr_number: int,
                    streams: Sequence[Sequence[DirectedInstr]],
                    rng: Randomizer,
                    regs: RegisterAllocation) -> List[DirectedInstr]:
    body = generate_filler_instrs(instr_number, rng, regs)
    merged = insert_streams(body, streams, rng)
    check_program_labels(merged)
    return merged


def render_instrs(instrs: Sequence[DirectedInstr], arch: ArchConfig) -> str:
    p = AsmProgram(arch=arch)
    for instr in instrs:
        p.extend(instr.to_nodes())
    return p.render()


def render_program(template: TemplateInstance, instrs: Sequence[DirectedInstr], arch: ArchConfig) -> str:
    return template.get_complete_template(render_instrs(instrs, arch))
