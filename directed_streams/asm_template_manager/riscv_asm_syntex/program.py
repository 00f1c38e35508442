# -*- coding: utf-8 -*-

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
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from .arch import ArchConfig
from .nodes import AsmNode, Instruction, Directive, Label, Hook

def _hex_or_str(v: Union[int, str]) -> str:
    """Integers (including CSR enum members) render as 0x-prefixed hex, strings pass through."""
    return v if isinstance(v, str) else hex(v)

@dataclass
class AsmProgram:
    """
    Linear container of assembly nodes with a builder-style API.
    Templates are built once with Hook placeholders; generated streams are
    spliced in through fill_hook before rendering.
    """
    arch: ArchConfig = field(default_factory=ArchConfig)
    nodes: List[AsmNode] = field(default_factory=list)
    hook_map: Dict[str, List[int]] = field(default_factory=dict, repr=False)

    # ---------------- Structure ----------------

    def add(self, node: AsmNode) -> "AsmProgram":
        self.nodes.append(node)
        return self

    def extend(self, nodes: Iterable[AsmNode]) -> "AsmProgram":
        for node in nodes:
            self.add(node)
        return self

    def label(self, name: str) -> "AsmProgram":
        return self.add(Label(name))

    def directive(self, name: str, *args: str) -> "AsmProgram":
        return self.add(Directive(name, list(args)))

    def option(self, opt: str) -> "AsmProgram":
        return self.directive("option", opt)

    def align(self, n: int) -> "AsmProgram":
        return self.directive("align", str(n))

    def globl(self, symbol: str) -> "AsmProgram":
        return self.directive("globl", symbol)

    def section(self, name: str, flags: Optional[str] = None, sect_type: Optional[str] = None) -> "AsmProgram":
        parts = [name]
        if flags is not None:
            parts.append(f"\"{flags}\"")
        if sect_type is not None:
            parts.append(sect_type)
        return self.directive("section", ", ".join(parts))

    def instr(self, mnemonic: str, *operands: str, comment: Optional[str] = None) -> "AsmProgram":
        return self.add(Instruction(mnemonic, list(operands), comment=comment))

    def hook(self, name: str) -> "AsmProgram":
        self.hook_map.setdefault(name, []).append(len(self.nodes))
        return self.add(Hook(name))

    # ---------------- Instruction wrappers ----------------

    def li(self, rd: str, imm: Union[int, str]) -> "AsmProgram":
        return self.instr("li", rd, _hex_or_str(imm))

    def la(self, rd: str, symbol: str) -> "AsmProgram":
        return self.instr("la", rd, symbol)

    def mret(self) -> "AsmProgram":
        return self.instr("mret")

    def dret(self) -> "AsmProgram":
        return self.instr("dret")

    def csrr(self, rd: str, csr: Union[int, str]) -> "AsmProgram":
        return self.instr("csrr", rd, _hex_or_str(csr))

    def csrw(self, csr: Union[int, str], rs: str, comment: Optional[str] = None) -> "AsmProgram":
        return self.instr("csrw", _hex_or_str(csr), rs, comment=comment)

    def csrwi(self, csr: Union[int, str], uimm: int, comment: Optional[str] = None) -> "AsmProgram":
        return self.instr("csrwi", _hex_or_str(csr), str(uimm), comment=comment)

    def sw(self, rs2: str, offset_rs1: str) -> "AsmProgram":
        return self.instr("sw", rs2, offset_rs1)

    # ---------------- Data ----------------

    def data_word(self, *values: Union[int, str]) -> "AsmProgram":
        return self.directive("word", ", ".join(_hex_or_str(v) for v in values))

    def data_dword(self, value: Union[int, str]) -> "AsmProgram":
        return self.directive("dword", _hex_or_str(value))

    def data_ptr(self, value: Union[int, str] = 0) -> "AsmProgram":
        """Pointer-sized data slot: .dword on RV64, .word on RV32."""
        if self.arch.is_rv64():
            return self.data_dword(value)
        return self.data_word(value)

    # ---------------- Hooks ----------------

    def fill_hook(self, name: str, nodes: Iterable[AsmNode]) -> "AsmProgram":
        """
        Replace every Hook named `name` with the given nodes.
        Plain (mnemonic, *operands) tuples are accepted as instructions.
        """
        prepared: List[AsmNode] = []
        for n in nodes:
            if isinstance(n, AsmNode):
                prepared.append(n)
            elif isinstance(n, tuple) and n:
                prepared.append(Instruction(str(n[0]), [str(x) for x in n[1:]]))
            else:
                raise TypeError(f"Unsupported node type in fill_hook: {type(n)}")

        out: List[AsmNode] = []
        replaced = False
        for node in self.nodes:
            if isinstance(node, Hook) and node.name == name:
                out.extend(prepared)
                replaced = True
            else:
                out.append(node)
        if not replaced:
            raise KeyError(f"Hook '{name}' not found.")
        self.nodes = out
        self._reindex_hooks()
        return self

    def _reindex_hooks(self) -> None:
        self.hook_map = {}
        for idx, node in enumerate(self.nodes):
            if isinstance(node, Hook):
                self.hook_map.setdefault(node.name, []).append(idx)

    def get_hook_idx(self, name: str, occurrence: int = 0) -> int:
        lst = self.hook_map.get(name)
        if not lst or occurrence >= len(lst):
            raise KeyError(f"Hook '{name}' not found (occurrence={occurrence}).")
        return lst[occurrence]

    # ---------------- Rendering ----------------

    def render(self) -> str:
        return "\n".join(node.render() for node in self.nodes).rstrip() + "\n"

    def render_slice(self, start: int, end: int) -> str:
        lines = [n.render() for n in self.nodes[start:end]]
        return "\n".join(lines).rstrip() + "\n" if lines else ""
