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
from typing import Tuple


@dataclass(frozen=True)
class TemplateInstance:
    """
    Immutable, pre-rendered test template.

    Attributes:
        header: assembly before the main body (startup, handlers)
        footer: assembly after the main body (exit path, data sections)
        isa: ISA string (e.g., 'rv64gc')
        arch_bits: XLEN (32 or 64)
        scratch_regs: registers the template's debug handler relies on
    """
    header: str
    footer: str
    isa: str
    arch_bits: int
    scratch_regs: Tuple[str, ...]

    def get_complete_template(self, instructions: str) -> str:
        """
        Get complete program with instructions inserted between header and footer.
        """
        return f"{self.header}{instructions}{self.footer}"
