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

from .template_instance import TemplateInstance
from .template_builder import create_template_instance, build_template
from .constants import HOOK_MAIN
from .riscv_asm_syntex import ArchConfig, AsmProgram

__all__ = [
    "TemplateInstance",
    "create_template_instance",
    "build_template",
    "HOOK_MAIN",
    "ArchConfig",
    "AsmProgram",
]
