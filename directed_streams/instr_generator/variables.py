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

from dataclasses import dataclass
from typing import Sequence, Tuple

# Define the range of RISC-V general-purpose integer registers
reg_range = [
    "zero", "ra", "sp", "gp", "tp", "t0", "t1", "t2", "s0", "s1",
    "a0", "a1", "a2", "a3", "a4", "a5", "a6", "a7", "s2", "s3",
    "s4", "s5", "s6", "s7", "s8", "s9", "s10", "s11", "t3", "t4",
    "t5", "t6",
]

# Never picked as destination of random instructions
special_registers = ["zero", "sp", "gp", "tp"]

# Destination of CSR writes whose old value is not needed
DISCARD_REG = "zero"

# Index of the scratch register used to stage addresses
ADDR_SCRATCH_IDX = 1

DEFAULT_SCRATCH_REGS = ("s10", "s11")


@dataclass(frozen=True)
class RegisterAllocation:
    """
    Pool of general-purpose registers reserved for test generation.
    Random filler instructions never write them.
    """
    scratch: Tuple[str, ...] = DEFAULT_SCRATCH_REGS

    def __post_init__(self):
        if len(self.scratch) <= ADDR_SCRATCH_IDX:
            raise ValueError(f"At least {ADDR_SCRATCH_IDX + 1} scratch registers are required, got {list(self.scratch)}")
        for reg in self.scratch:
            if reg not in reg_range:
                raise ValueError(f"Unknown register: {reg}")
            if reg in special_registers:
                raise ValueError(f"Register {reg} cannot be reserved as scratch")
        if len(set(self.scratch)) != len(self.scratch):
            raise ValueError(f"Duplicate scratch registers: {list(self.scratch)}")

    @classmethod
    def from_names(cls, names: Sequence[str]) -> "RegisterAllocation":
        return cls(tuple(names))

    @property
    def addr_reg(self) -> str:
        return self.scratch[ADDR_SCRATCH_IDX]

    def is_reserved(self, reg: str) -> bool:
        return reg in self.scratch

    def available_rd(self):
        """Registers random instructions may write."""
        return [r for r in reg_range if r not in special_registers and r not in self.scratch]
