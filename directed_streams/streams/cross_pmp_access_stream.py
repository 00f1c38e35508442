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
Cross PMP region access stream.

Picks an already configured NAPOT region and performs one load or store that
starts just below its top or bottom boundary, so the access straddles the
boundary by a controlled number of bytes:

    la      <scratch1>, <boundary - offset>
    <op>    <data reg>, 0(<scratch1>)

The target is truncated to XLEN. PMP addresses are 34 bits wide on RV32, so
a boundary above 4 GiB (or a bottom boundary at 0) wraps; such accesses are
still emitted and logged as a warning.
"""

import logging
from typing import Optional

from ..instr_generator.instr_defs import ACCESS_WIDTH, get_instruction_category
from ..instr_generator.instruction import DirectedInstr, NumericImm
from .base import DirectedStream, GenContext, Generated, Skipped, StreamResult
from .pmp import NapotGeometry, PmpAddrMode, decode_napot
from .registry import register_stream

logger = logging.getLogger(__name__)

MEM_OPS = ('lh', 'lhu', 'lw', 'sh', 'sw')
# Lowest region index eligible for the access; lower regions belong to the test setup
MIN_REGION_IDX = 2
HALFWORD_OFFSET = 1
WORD_OFFSETS = (1, 2)


@register_stream
class CrossPmpRegionAccessStream(DirectedStream):

    stream_type = "cross_pmp_access"

    def __init__(self, name: str, label: str = ""):
        super().__init__(name, label)
        self._reset_selection()

    def _reset_selection(self) -> None:
        self.region_idx: Optional[int] = None
        self.geometry: Optional[NapotGeometry] = None
        self.at_top: Optional[bool] = None
        self.mem_op: Optional[str] = None
        self.offset: Optional[int] = None
        self.target_addr: Optional[int] = None

    def pmp_region_top_addr(self) -> int:
        if self.geometry is None:
            raise ValueError(f"{self.name}: no region selected")
        return self.geometry.top

    def pmp_region_bottom_addr(self) -> int:
        if self.geometry is None:
            raise ValueError(f"{self.name}: no region selected")
        return self.geometry.bottom

    def select_region(self, ctx: GenContext) -> Optional[int]:
        """Uniformly pick a NAPOT region with index in (1, num_regions)."""
        pmp = ctx.pmp
        return ctx.rng.pick_index(range(pmp.num_regions),
                                  lambda r: r >= MIN_REGION_IDX,
                                  lambda r: pmp.mode(r) == PmpAddrMode.NAPOT)

    def generate(self, ctx: GenContext,
                 at_top: Optional[bool] = None,
                 mem_op: Optional[str] = None,
                 offset: Optional[int] = None) -> StreamResult:
        """
        Optional arguments pin the corresponding random choice.

        Raises:
            ValueError: a pinned choice is outside its legal set.
        """
        self._reset_selection()
        self.instr_list = []

        region_idx = self.select_region(ctx)
        if region_idx is None:
            return Skipped(f"no NAPOT region with index >= {MIN_REGION_IDX} "
                           f"among {ctx.pmp.num_regions} regions")
        self.region_idx = region_idx
        self.geometry = decode_napot(ctx.pmp.addr(region_idx))

        self.at_top = ctx.rng.coin() if at_top is None else at_top

        if mem_op is None:
            mem_op = ctx.rng.choice(MEM_OPS)
        elif mem_op not in MEM_OPS:
            raise ValueError(f"mem_op must be one of {MEM_OPS}: {mem_op}")
        self.mem_op = mem_op

        legal_offsets = WORD_OFFSETS if ACCESS_WIDTH[mem_op] == 4 else (HALFWORD_OFFSET,)
        if offset is None:
            offset = ctx.rng.choice(legal_offsets)
        elif offset not in legal_offsets:
            raise ValueError(f"offset for {mem_op} must be one of {legal_offsets}: {offset}")
        self.offset = offset

        boundary = self.pmp_region_top_addr() if self.at_top else self.pmp_region_bottom_addr()
        self.target_addr = (boundary - offset) & ctx.arch.xlen_mask()
        if self.target_addr != boundary - offset:
            logger.warning(f"[{self.name}] target {boundary - offset:#x} of pmp{region_idx} does not fit "
                           f"XLEN={ctx.arch.arch_bits}, truncated to {self.target_addr:#x}")

        addr_reg = ctx.regs.addr_reg
        data_reg = ctx.rng.choice(ctx.regs.available_rd())
        access = DirectedInstr(mem_op, rs1=addr_reg, imm=NumericImm(0))
        if get_instruction_category(mem_op) == 'LOAD':
            access.rd = data_reg
        else:
            access.rs2 = data_reg

        self.initialize(2)
        self.instr_list[0] = DirectedInstr('la', rd=addr_reg, imm=NumericImm(self.target_addr))
        self.instr_list[1] = access

        logger.debug(f"[{self.name}] pmp{region_idx} [{self.geometry.bottom:#x}, {self.geometry.top:#x}) "
                     f"{'top' if self.at_top else 'bottom'} {mem_op} @ {self.target_addr:#x}")
        return Generated(tuple(self.instr_list))

    def finalize(self, ctx: GenContext) -> None:
        super().finalize(ctx)
