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
NAPOT region setup stream.

    csrrsi  zero, pmpcfg0, <16..23>
<label>:
    nop
    la      <scratch1>, <label>+16
    srli    <scratch1>, <scratch1>, 2
    csrrw   zero, pmpaddr0, <scratch1>

pmpaddr0 receives the word address of a point 16 bytes after the labeled nop,
so the region is placed relative to this code's own final location. Nothing
here needs to know the load address; the assembler resolves the label.
"""

from ..asm_template_manager.riscv_asm_syntex import pmpaddr, pmpcfg
from ..instr_generator.instruction import DirectedInstr, NumericImm, SymbolicImm
from ..instr_generator.variables import DISCARD_REG
from .base import DirectedStream, GenContext, Generated, StreamResult
from .registry import register_stream

PMP_CFG_MIN = 16
PMP_CFG_MAX = 23
REGION_LABEL_OFFSET = 16
PMPADDR_SHIFT = 2
TARGET_REGION = 0


@register_stream
class NapotRegionSetupStream(DirectedStream):

    stream_type = "napot_setup"

    def generate(self, ctx: GenContext) -> StreamResult:
        addr_reg = ctx.regs.addr_reg
        cfg_value = ctx.rng.randint(PMP_CFG_MIN, PMP_CFG_MAX)
        label = ctx.labels.generate_random_label(f"{self.name}_region", ctx.rng)

        self.initialize(5)
        self.instr_list[0] = DirectedInstr('csrrsi', rd=DISCARD_REG,
                                           csr=pmpcfg(TARGET_REGION, ctx.arch.arch_bits),
                                           imm=NumericImm(cfg_value), atomic=True)
        self.instr_list[1] = DirectedInstr('nop', label=label, atomic=True)
        self.instr_list[2] = DirectedInstr('la', rd=addr_reg,
                                           imm=SymbolicImm(label, REGION_LABEL_OFFSET), atomic=True)
        self.instr_list[3] = DirectedInstr('srli', rd=addr_reg, rs1=addr_reg,
                                           imm=NumericImm(PMPADDR_SHIFT), atomic=True)
        self.instr_list[4] = DirectedInstr('csrrw', rd=DISCARD_REG, csr=pmpaddr(TARGET_REGION),
                                           rs1=addr_reg, atomic=True)
        return Generated(tuple(self.instr_list))

    def finalize(self, ctx: GenContext) -> None:
        self._mark_boundaries()
