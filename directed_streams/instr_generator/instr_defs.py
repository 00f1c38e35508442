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

# Instruction table used by the directed streams.
# format:    assembly template, {VAR} placeholders are filled from operand slots
# variables: operand slots, IMM_x / UIMM_x name the immediate width for random fill
# category:  instruction kind used for allowed/excluded sets

INSTRUCTION_FORMATS = {
    # ---- Integer arithmetic ----
    'add':    {'format': 'add {RD}, {RS1}, {RS2}',  'variables': ['RD', 'RS1', 'RS2'],     'category': 'ARITHMETIC'},
    'sub':    {'format': 'sub {RD}, {RS1}, {RS2}',  'variables': ['RD', 'RS1', 'RS2'],     'category': 'ARITHMETIC'},
    'addi':   {'format': 'addi {RD}, {RS1}, {IMM}', 'variables': ['RD', 'RS1', 'IMM_12'],  'category': 'ARITHMETIC'},
    'lui':    {'format': 'lui {RD}, {IMM}',         'variables': ['RD', 'UIMM_20'],        'category': 'ARITHMETIC'},
    'auipc':  {'format': 'auipc {RD}, {IMM}',       'variables': ['RD', 'UIMM_20'],        'category': 'ARITHMETIC'},

    # ---- Logical ----
    'and':    {'format': 'and {RD}, {RS1}, {RS2}',  'variables': ['RD', 'RS1', 'RS2'],     'category': 'LOGICAL'},
    'or':     {'format': 'or {RD}, {RS1}, {RS2}',   'variables': ['RD', 'RS1', 'RS2'],     'category': 'LOGICAL'},
    'xor':    {'format': 'xor {RD}, {RS1}, {RS2}',  'variables': ['RD', 'RS1', 'RS2'],     'category': 'LOGICAL'},
    'andi':   {'format': 'andi {RD}, {RS1}, {IMM}', 'variables': ['RD', 'RS1', 'IMM_12'],  'category': 'LOGICAL'},
    'ori':    {'format': 'ori {RD}, {RS1}, {IMM}',  'variables': ['RD', 'RS1', 'IMM_12'],  'category': 'LOGICAL'},
    'xori':   {'format': 'xori {RD}, {RS1}, {IMM}', 'variables': ['RD', 'RS1', 'IMM_12'],  'category': 'LOGICAL'},

    # ---- Shift ----
    'sll':    {'format': 'sll {RD}, {RS1}, {RS2}',  'variables': ['RD', 'RS1', 'RS2'],     'category': 'SHIFT'},
    'srl':    {'format': 'srl {RD}, {RS1}, {RS2}',  'variables': ['RD', 'RS1', 'RS2'],     'category': 'SHIFT'},
    'sra':    {'format': 'sra {RD}, {RS1}, {RS2}',  'variables': ['RD', 'RS1', 'RS2'],     'category': 'SHIFT'},
    'slli':   {'format': 'slli {RD}, {RS1}, {IMM}', 'variables': ['RD', 'RS1', 'UIMM_5'],  'category': 'SHIFT'},
    'srli':   {'format': 'srli {RD}, {RS1}, {IMM}', 'variables': ['RD', 'RS1', 'UIMM_5'],  'category': 'SHIFT'},
    'srai':   {'format': 'srai {RD}, {RS1}, {IMM}', 'variables': ['RD', 'RS1', 'UIMM_5'],  'category': 'SHIFT'},

    # ---- Compare ----
    'slt':    {'format': 'slt {RD}, {RS1}, {RS2}',   'variables': ['RD', 'RS1', 'RS2'],    'category': 'COMPARE'},
    'sltu':   {'format': 'sltu {RD}, {RS1}, {RS2}',  'variables': ['RD', 'RS1', 'RS2'],    'category': 'COMPARE'},
    'slti':   {'format': 'slti {RD}, {RS1}, {IMM}',  'variables': ['RD', 'RS1', 'IMM_12'], 'category': 'COMPARE'},
    'sltiu':  {'format': 'sltiu {RD}, {RS1}, {IMM}', 'variables': ['RD', 'RS1', 'IMM_12'], 'category': 'COMPARE'},

    # ---- Load / Store ----
    'lb':     {'format': 'lb {RD}, {IMM}({RS1})',   'variables': ['RD', 'IMM_12', 'RS1'],  'category': 'LOAD'},
    'lbu':    {'format': 'lbu {RD}, {IMM}({RS1})',  'variables': ['RD', 'IMM_12', 'RS1'],  'category': 'LOAD'},
    'lh':     {'format': 'lh {RD}, {IMM}({RS1})',   'variables': ['RD', 'IMM_12', 'RS1'],  'category': 'LOAD'},
    'lhu':    {'format': 'lhu {RD}, {IMM}({RS1})',  'variables': ['RD', 'IMM_12', 'RS1'],  'category': 'LOAD'},
    'lw':     {'format': 'lw {RD}, {IMM}({RS1})',   'variables': ['RD', 'IMM_12', 'RS1'],  'category': 'LOAD'},
    'sb':     {'format': 'sb {RS2}, {IMM}({RS1})',  'variables': ['RS2', 'IMM_12', 'RS1'], 'category': 'STORE'},
    'sh':     {'format': 'sh {RS2}, {IMM}({RS1})',  'variables': ['RS2', 'IMM_12', 'RS1'], 'category': 'STORE'},
    'sw':     {'format': 'sw {RS2}, {IMM}({RS1})',  'variables': ['RS2', 'IMM_12', 'RS1'], 'category': 'STORE'},

    # ---- Control flow ----
    'beq':    {'format': 'beq {RS1}, {RS2}, {IMM}', 'variables': ['RS1', 'RS2', 'LABEL'],  'category': 'BRANCH'},
    'bne':    {'format': 'bne {RS1}, {RS2}, {IMM}', 'variables': ['RS1', 'RS2', 'LABEL'],  'category': 'BRANCH'},
    'jal':    {'format': 'jal {RD}, {IMM}',         'variables': ['RD', 'LABEL'],          'category': 'JUMP'},

    # ---- Zicsr ----
    'csrrw':  {'format': 'csrrw {RD}, {CSR}, {RS1}',  'variables': ['RD', 'CSR', 'RS1'],    'category': 'CSR'},
    'csrrs':  {'format': 'csrrs {RD}, {CSR}, {RS1}',  'variables': ['RD', 'CSR', 'RS1'],    'category': 'CSR'},
    'csrrwi': {'format': 'csrrwi {RD}, {CSR}, {IMM}', 'variables': ['RD', 'CSR', 'UIMM_5'], 'category': 'CSR'},
    'csrrsi': {'format': 'csrrsi {RD}, {CSR}, {IMM}', 'variables': ['RD', 'CSR', 'UIMM_5'], 'category': 'CSR'},

    # ---- System ----
    'ebreak': {'format': 'ebreak', 'variables': [], 'category': 'TRAP'},
    'ecall':  {'format': 'ecall',  'variables': [], 'category': 'TRAP'},
    'nop':    {'format': 'nop',    'variables': [], 'category': 'NOP'},

    # ---- Pseudo ----
    'la':     {'format': 'la {RD}, {IMM}', 'variables': ['RD', 'LABEL'], 'category': 'PSEUDO'},
}

# Access width in bytes for memory instructions
ACCESS_WIDTH = {
    'lb': 1, 'lbu': 1, 'sb': 1,
    'lh': 2, 'lhu': 2, 'sh': 2,
    'lw': 4, 'sw': 4,
}

CONTROL_FLOW_CATEGORIES = ('BRANCH', 'JUMP')
MEMORY_CATEGORIES = ('LOAD', 'STORE')


def get_instruction_format(instruction):
    fmt = INSTRUCTION_FORMATS.get(instruction)
    if fmt is None:
        raise KeyError(f"Unknown instruction: {instruction}")
    return fmt


def get_instruction_category(instruction):
    return get_instruction_format(instruction)['category']


def get_instrs_by_category(*categories):
    """All mnemonics whose category is one of `categories`, in table order."""
    return [name for name, fmt in INSTRUCTION_FORMATS.items() if fmt['category'] in categories]


def is_memory_instr(instruction):
    return get_instruction_category(instruction) in MEMORY_CATEGORIES


def is_control_flow_instr(instruction):
    return get_instruction_category(instruction) in CONTROL_FLOW_CATEGORIES
