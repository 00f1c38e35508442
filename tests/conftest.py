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

import pytest

from directed_streams.asm_template_manager.riscv_asm_syntex import ArchConfig
from directed_streams.instr_generator.label_manager import LabelManager
from directed_streams.instr_generator.randomizer import Randomizer
from directed_streams.instr_generator.variables import RegisterAllocation
from directed_streams.streams import GenContext, PmpAddrMode, PmpConfigView, PmpRegionCfg


@pytest.fixture
def napot_view():
    """Factory: PMP view with NAPOT regions at the given {index: pmpaddr} and OFF elsewhere."""
    def _view(num_regions, napot_addrs):
        configured = {idx: PmpRegionCfg(PmpAddrMode.NAPOT, addr, read=True, write=True)
                      for idx, addr in napot_addrs.items()}
        return PmpConfigView.from_regions(num_regions, configured)
    return _view


@pytest.fixture
def make_ctx():
    def _make(seed=1, pmp=None, arch_bits=64, scratch=("s10", "s11")):
        return GenContext(
            pmp=pmp if pmp is not None else PmpConfigView.empty(16),
            regs=RegisterAllocation(tuple(scratch)),
            rng=Randomizer(seed),
            labels=LabelManager(),
            arch=ArchConfig(arch_bits, f"rv{arch_bits}gc_zicsr_zifencei"),
        )
    return _make


@pytest.fixture
def ctx(make_ctx):
    return make_ctx()
