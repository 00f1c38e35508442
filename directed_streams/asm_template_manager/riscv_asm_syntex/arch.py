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

from __future__ import annotations
from dataclasses import dataclass

@dataclass(frozen=True)
class ArchConfig:
    """
    Target architecture for the generated programs:
    - arch_bits: XLEN (32/64), decides data directive widths and address masking
    - isa:       -march string recorded next to the generated seeds
    """
    arch_bits: int = 64
    isa: str = "rv64gc_zicsr_zifencei"

    def __post_init__(self):
        if self.arch_bits not in (32, 64):
            raise ValueError(f"Unsupported XLEN: {self.arch_bits}")

    def is_rv64(self) -> bool:
        return self.arch_bits == 64

    def get_arch_bits(self) -> int:
        return self.arch_bits

    def get_isa(self) -> str:
        return self.isa

    def xlen_mask(self) -> int:
        return (1 << self.arch_bits) - 1
