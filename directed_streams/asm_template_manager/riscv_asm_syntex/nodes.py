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
from typing import Sequence, Optional

class AsmNode:
    """Assembly syntax tree base class"""
    def render(self) -> str:
        raise NotImplementedError

@dataclass
class Label(AsmNode):
    """
    Label definition. Stream labels are referenced later as 'name+offset'
    immediates and resolved by the assembler once the layout is final.
    """
    name: str
    def render(self) -> str:
        return f"{self.name}:"

@dataclass
class Directive(AsmNode):
    """Assembler directive rendered as '.name arg1, arg2'"""
    name: str
    args: Sequence[str] = field(default_factory=list)

    def render(self) -> str:
        if self.args:
            return f".{self.name} {', '.join(self.args)}"
        return f".{self.name}"

@dataclass
class Instruction(AsmNode):
    """One machine or pseudo instruction: mnemonic, operand strings, optional trailing comment"""
    mnemonic: str
    operands: Sequence[str] = field(default_factory=list)
    comment: Optional[str] = None

    def text(self) -> str:
        if not self.operands:
            return self.mnemonic
        return f"{self.mnemonic:<8}{', '.join(self.operands)}"

    def render(self) -> str:
        s = f"  {self.text()}"
        if self.comment:
            s = f"{s:<40}# {self.comment}"
        return s.rstrip()

@dataclass
class Hook(AsmNode):
    """
    Named insertion point in a template. Rendering an unfilled hook leaves a marker comment.
    """
    name: str
    def render(self) -> str:
        return f"# <HOOK name='{self.name}' (empty)>"
