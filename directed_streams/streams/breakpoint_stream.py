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
Breakpoint stream.

Layout:
    la      <scratch1>, <label>+4
    ebreak
    <filler 1>
    ...
<label>:
    <filler n>

The ebreak enters the debug handler, which arms trigger 0 at the address held
in scratch register 1 and resumes. The trigger then fires right after the
labeled filler instruction.
"""

from typing import Optional

from ..instr_generator.generator import generate_filler_instrs
from ..instr_generator.instruction import DirectedInstr, SymbolicImm
from .base import DirectedStream, GenContext, Generated, StreamResult
from .registry import register_stream

MIN_FILLER = 5
MAX_FILLER = 10
TRIGGER_OFFSET = 4


@register_stream
class BreakpointStream(DirectedStream):

    stream_type = "breakpoint"

    def __init__(self, name: str, label: str = ""):
        super().__init__(name, label)
        self.trigger_label: Optional[str] = None

    def generate(self, ctx: GenContext, filler_count: Optional[int] = None) -> StreamResult:
        if filler_count is None:
            filler_count = ctx.rng.randint(MIN_FILLER, MAX_FILLER)
        if filler_count < 1:
            raise ValueError(f"filler_count must be >= 1: {filler_count}")

        self.initialize(filler_count)
        body = generate_filler_instrs(filler_count, ctx.rng, ctx.regs, atomic=True)
        for idx, instr in enumerate(body):
            self.instr_list[idx] = instr

        # Claimed once per program; regenerating the same stream reuses it
        if self.trigger_label is None or not ctx.labels.is_used(self.trigger_label):
            self.trigger_label = ctx.labels.derive_label(self.name, "bkpt")
        label = self.trigger_label
        self.instr_list[-1].label = label

        load_addr = DirectedInstr('la', rd=ctx.regs.addr_reg,
                                  imm=SymbolicImm(label, TRIGGER_OFFSET), atomic=True)
        trap = DirectedInstr('ebreak', atomic=True)
        self.instr_list[0:0] = [load_addr, trap]
        return Generated(tuple(self.instr_list))

    def finalize(self, ctx: GenContext) -> None:
        # Labels and atomic flags were set by generate()
        self._mark_boundaries()
