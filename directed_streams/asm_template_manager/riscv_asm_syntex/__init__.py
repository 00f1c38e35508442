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

from .arch import ArchConfig
from .csr import CSR, pmpaddr, pmpcfg
from .nodes import AsmNode, Label, Directive, Instruction, Hook
from .program import AsmProgram

__all__ = [
    "ArchConfig",
    "CSR",
    "pmpaddr",
    "pmpcfg",
    "AsmNode",
    "Label",
    "Directive",
    "Instruction",
    "Hook",
    "AsmProgram",
]
