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

import re
from typing import List, Optional, Sequence

from .instr_defs import INSTRUCTION_FORMATS, get_instrs_by_category
from .instruction import DirectedInstr, NumericImm
from .randomizer import Randomizer
from .variables import RegisterAllocation, reg_range

# Kinds allowed in bodies that must not disturb control flow or memory state
FILLER_CATEGORIES = ('ARITHMETIC', 'LOGICAL', 'SHIFT', 'COMPARE')

# Relative frequency of each filler category
FILLER_PROBABILITIES = {
    'ARITHMETIC': 0.35,
    'LOGICAL':    0.25,
    'SHIFT':      0.20,
    'COMPARE':    0.20,
}


def gen_imm(imm_type: str, rng: Randomizer) -> int:
    """
    Generates a random immediate for an 'IMM_x' (signed) or 'UIMM_x' (unsigned)
    operand of x bits. Half of the draws hit a boundary value.

    :param imm_type: The immediate type, e.g. 'IMM_12', 'UIMM_5'.
    :param rng: Random source.
    :return: Generated immediate value.
    """
    match = re.match(r'(IMM|UIMM)(?:_(\d+))?$', imm_type)
    if not match:
        raise ValueError(f"Unsupported immediate type: {imm_type}")
    length = int(match.group(2)) if match.group(2) else 12
    if match.group(1) == 'IMM':
        min_value = -2 ** (length - 1)
        max_value = 2 ** (length - 1) - 1
        special_values = [min_value, max_value, 0, 1, -1]
    else:
        min_value = 0
        max_value = 2 ** length - 1
        special_values = [min_value, max_value, 1]

    if rng.random() < 0.5:
        return rng.choice(special_values)
    return rng.randint(min_value, max_value)


def generate_filler_instr(rng: Randomizer,
                          regs: RegisterAllocation,
                          categories: Sequence[str] = FILLER_CATEGORIES) -> DirectedInstr:
    """
    Generate one random instruction from `categories`.
    The destination is never a scratch or special register.
    """
    weights = [FILLER_PROBABILITIES.get(c, 0.1) for c in categories]
    category = rng.weighted_choice(list(categories), weights)
    candidates = get_instrs_by_category(category)
    if not candidates:
        raise ValueError(f"No instructions in category {category}")
    name = rng.choice(candidates)

    instr = DirectedInstr(name)
    for var in INSTRUCTION_FORMATS[name]['variables']:
        if var == 'RD':
            instr.rd = rng.choice(regs.available_rd())
        elif var == 'RS1':
            instr.rs1 = rng.choice(reg_range)
        elif var == 'RS2':
            instr.rs2 = rng.choice(reg_range)
        elif 'IMM' in var:
            instr.imm = NumericImm(gen_imm(var, rng))
        else:
            raise ValueError(f"Filler instruction {name} needs unsupported operand {var}")
    return instr


def generate_filler_instrs(count: int,
                           rng: Randomizer,
                           regs: RegisterAllocation,
                           atomic: bool = False,
                           categories: Optional[Sequence[str]] = None) -> List[DirectedInstr]:
    """Generate `count` unlabeled filler instructions."""
    cats = categories or FILLER_CATEGORIES
    instrs = []
    for _ in range(count):
        instr = generate_filler_instr(rng, regs, cats)
        instr.atomic = atomic
        instrs.append(instr)
    return instrs
