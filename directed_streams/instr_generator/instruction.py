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
Abstract instructions produced by the directed streams.

An instruction keeps its operands in named slots until it is rendered. The
immediate slot holds either a resolved number or a symbolic 'label+offset'
expression; symbolic immediates are left to the assembler, which resolves
them once the final layout of the program is known.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Union

from .instr_defs import get_instruction_format
from ..asm_template_manager.riscv_asm_syntex import AsmNode, Instruction, Label


@dataclass(frozen=True)
class NumericImm:
    value: int

    def render(self, as_hex: bool = False) -> str:
        return hex(self.value) if as_hex else str(self.value)


@dataclass(frozen=True)
class SymbolicImm:
    """Address of `label` plus a byte offset."""
    label: str
    offset: int = 0

    def render(self, as_hex: bool = False) -> str:
        if self.offset > 0:
            return f"{self.label}+{self.offset}"
        if self.offset < 0:
            return f"{self.label}-{-self.offset}"
        return self.label


Immediate = Union[NumericImm, SymbolicImm]

# Address-sized immediates read better in hex
_HEX_IMM_INSTRS = ('la', 'lui', 'auipc')


@dataclass
class DirectedInstr:
    """
    One abstract instruction.

    Attributes:
        name:     mnemonic, must exist in INSTRUCTION_FORMATS
        category: instruction kind, taken from the instruction table
        rd/rs1/rs2: register operand names (ABI names)
        imm:      NumericImm or SymbolicImm
        csr:      CSR address for Zicsr instructions
        label:    label attached to this instruction's address
        atomic:   must stay contiguous with its neighbours in the stream
        comment:  trailing assembly comment
    """
    name: str
    category: str = ""
    rd: Optional[str] = None
    rs1: Optional[str] = None
    rs2: Optional[str] = None
    imm: Optional[Immediate] = None
    csr: Optional[int] = None
    label: Optional[str] = None
    atomic: bool = False
    comment: Optional[str] = None

    def __post_init__(self):
        fmt = get_instruction_format(self.name)
        if not self.category:
            self.category = fmt['category']

    def symbolic_label(self) -> Optional[str]:
        """Label referenced by the immediate, if the immediate is symbolic."""
        if isinstance(self.imm, SymbolicImm):
            return self.imm.label
        return None

    def _slot_value(self, var: str) -> str:
        if var == 'RD':
            value = self.rd
        elif var == 'RS1':
            value = self.rs1
        elif var == 'RS2':
            value = self.rs2
        elif var == 'CSR':
            value = None if self.csr is None else hex(self.csr)
        elif 'IMM' in var or var == 'LABEL':
            value = None if self.imm is None else self.imm.render(self.name in _HEX_IMM_INSTRS)
        else:
            raise ValueError(f"Unknown operand slot {var} for {self.name}")
        if value is None:
            raise ValueError(f"Operand {var} of '{self.name}' is not set")
        return value

    def text(self) -> str:
        fmt = get_instruction_format(self.name)
        text = fmt['format']
        for var in fmt['variables']:
            slot = 'IMM' if ('IMM' in var or var == 'LABEL') else var
            text = text.replace("{" + slot + "}", self._slot_value(var))
        return text

    def to_nodes(self) -> List[AsmNode]:
        """Render to assembly nodes: an optional Label followed by the Instruction."""
        nodes: List[AsmNode] = []
        if self.label:
            nodes.append(Label(self.label))
        mnemonic, _, operands = self.text().partition(' ')
        ops = [op.strip() for op in operands.split(',')] if operands else []
        nodes.append(Instruction(mnemonic, ops, comment=self.comment))
        return nodes

    def __str__(self) -> str:
        prefix = f"{self.label}: " if self.label else ""
        return prefix + self.text()
