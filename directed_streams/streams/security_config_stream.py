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
Machine security configuration stream.

    csrrwi  zero, mseccfg, <0..7>

Writes a random combination of the mseccfg MML, MMWP and RLB bits. The single
instruction is not atomic and may be scattered anywhere in the program body.
"""

import logging

from ..asm_template_manager.riscv_asm_syntex import CSR
from ..instr_generator.instruction import DirectedInstr, NumericImm
from ..instr_generator.variables import DISCARD_REG
from .base import DirectedStream, GenContext, Generated, StreamResult
from .registry import register_stream

logger = logging.getLogger(__name__)

# mseccfg low bits (Smepmp)
MSECCFG_MML = 1 << 0    # machine mode lockdown
MSECCFG_MMWP = 1 << 1   # machine mode whitelist policy
MSECCFG_RLB = 1 << 2    # rule locking bypass
MSECCFG_FIELD_MAX = 0b111


def decode_mseccfg(value: int) -> dict:
    return {
        'MML': bool(value & MSECCFG_MML),
        'MMWP': bool(value & MSECCFG_MMWP),
        'RLB': bool(value & MSECCFG_RLB),
    }


@register_stream
class SecurityConfigStream(DirectedStream):
    """
    Single `csrrwi zero, mseccfg, imm` with a uniformly random 3-bit imm.
    Not atomic: one instruction without dependencies can go anywhere.
    """

    stream_type = "security_config"

    def generate(self, ctx: GenContext) -> StreamResult:
        value = ctx.rng.randint(0, MSECCFG_FIELD_MAX)
        logger.debug(f"[{self.name}] mseccfg <- {value:#05b} {decode_mseccfg(value)}")
        self.instr_list = [
            DirectedInstr('csrrwi', rd=DISCARD_REG, csr=CSR.MSECCFG,
                          imm=NumericImm(value), atomic=False),
        ]
        return Generated(tuple(self.instr_list))

    def finalize(self, ctx: GenContext) -> None:
        self._mark_boundaries()
