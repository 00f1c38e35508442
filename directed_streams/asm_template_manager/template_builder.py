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

import random
from typing import Optional

from .riscv_asm_syntex import AsmProgram, ArchConfig, CSR, pmpaddr, pmpcfg
from .constants import *
from .template_instance import TemplateInstance
from ..instr_generator.variables import RegisterAllocation

# ==============================================================================
# Private Helper Functions (Internal Use Only)
# ==============================================================================

def _mcontrol_execute_trigger(arch: ArchConfig) -> int:
    """tdata1 value: mcontrol, debug-mode only, enter debug mode on M-mode execute match."""
    xlen = arch.get_arch_bits()
    dmode = 1 << (xlen - 5)
    return (MCONTROL_TYPE << (xlen - 4)) | dmode | MCONTROL_ACTION_DEBUG | MCONTROL_M | MCONTROL_EXECUTE


def _text_startup(p: AsmProgram, regs: RegisterAllocation) -> AsmProgram:
    """
    Build the startup sequence in .text:
    - Point MTVEC at the trap handler
    - Open the whole address space through the lowest-priority PMP entry
    - Clear the scratch registers and jump to main
    """
    p.globl(LBL_START).section(".text")
    p.label(LBL_START)

    p.label(LBL_TRAP_VEC_INIT)
    p.la("x13", LBL_OTHER_EXP)
    p.csrw(CSR.MTVEC, "x13", comment="MTVEC")

    p.label(LBL_PMP_SETUP)
    per_csr = 8 if p.arch.is_rv64() else 4
    shift = (PMP_ALLOW_ALL_REGION % per_csr) * 8
    p.li("x16", -1)
    p.csrw(pmpaddr(PMP_ALLOW_ALL_REGION), "x16", comment=f"pmpaddr{PMP_ALLOW_ALL_REGION}")
    p.li("x16", PMP_ALLOW_ALL_CFG << shift)
    p.csrw(pmpcfg(PMP_ALLOW_ALL_REGION, p.arch.get_arch_bits()), "x16", comment="NAPOT + RWX")

    p.label(LBL_INIT)
    for reg in regs.scratch:
        p.li(reg, 0)
    p.instr("j", LBL_MAIN)
    return p


def _exception_vector(p: AsmProgram) -> AsmProgram:
    """
    M-mode trap handler: step over the faulting instruction (mepc += 4) and mret.
    PMP access faults from the boundary accesses land here.
    """
    p.align(2)
    p.label(LBL_OTHER_EXP)
    p.option("norvc")
    p.csrr("x13", CSR.MEPC)
    p.instr("addi", "x13", "x13", "4")
    p.csrw(CSR.MEPC, "x13")
    p.mret()
    p.option("rvc")
    return p


def _main_with_hook(p: AsmProgram) -> AsmProgram:
    """
    main section with hook insertion point.
    """
    p.align(2)
    p.option("norvc")
    p.label(LBL_MAIN)
    p.hook(HOOK_MAIN)
    p.instr("j", LBL_WRITE_TOHOST)
    p.option("rvc")
    return p


def _debug_rom(p: AsmProgram, regs: RegisterAllocation) -> AsmProgram:
    """
    Debug handler.
    - Entered by ebreak: arm trigger 0 on the address staged in the address
      scratch register, step dpc over the ebreak.
    - Entered by the trigger: disarm trigger 0 so execution can resume.
    """
    p.label(LBL_DEBUG_ROM)
    p.csrw(CSR.DSCRATCH0, "t0")
    p.csrr("t0", CSR.DCSR)
    p.instr("srli", "t0", "t0", str(DCSR_CAUSE_SHIFT))
    p.instr("andi", "t0", "t0", str(DCSR_CAUSE_MASK))
    p.instr("addi", "t0", "t0", str(-DCSR_CAUSE_TRIGGER))
    p.instr("beqz", "t0", LBL_DEBUG_TRIGGER_HIT)

    p.csrwi(CSR.TSELECT, 0)
    p.li("t0", _mcontrol_execute_trigger(p.arch))
    p.csrw(CSR.TDATA1, "t0", comment="mcontrol execute")
    p.csrw(CSR.TDATA2, regs.addr_reg, comment="trigger address")
    p.csrr("t0", CSR.DPC)
    p.instr("addi", "t0", "t0", "4")
    p.csrw(CSR.DPC, "t0")
    p.instr("j", LBL_DEBUG_EXIT)

    p.label(LBL_DEBUG_TRIGGER_HIT)
    p.csrwi(CSR.TSELECT, 0)
    p.csrw(CSR.TDATA1, "zero")

    p.label(LBL_DEBUG_EXIT)
    p.csrr("t0", CSR.DSCRATCH0)
    p.dret()
    return p


def _support_routines(p: AsmProgram) -> AsmProgram:
    """
    Exit path: write 1 to tohost and spin.
    """
    p.label(LBL_WRITE_TOHOST)
    p.la("t1", SYM_TOHOST)
    p.li("t2", 1)
    p.sw("t2", "0(t1)")

    p.label(LBL_EXIT)
    p.instr("j", LBL_WRITE_TOHOST)
    return p


def _data_sections(p: AsmProgram, rng: Optional[random.Random] = None) -> AsmProgram:
    rng = rng or random.Random()
    p.section(".data")
    p.align(6); p.directive("global", SYM_TOHOST); p.label(SYM_TOHOST)
    p.data_ptr(0)
    p.align(6); p.directive("global", SYM_FROMHOST); p.label(SYM_FROMHOST)
    p.data_ptr(0)

    p.section(".region_0", flags="aw", sect_type="@progbits")
    p.label(SYM_REGION0)
    p.data_word(*[f"0x{rng.getrandbits(32):08x}" for _ in range(8)])
    return p


# ==============================================================================
# Public Template Build Functions
# ==============================================================================

def build_template(arch: ArchConfig,
                   regs: RegisterAllocation,
                   rng: Optional[random.Random] = None) -> AsmProgram:
    """
    Build the machine-mode template around the MAIN_BODY_HOOK.
    """
    p = AsmProgram(arch=arch)

    _text_startup(p, regs)
    _exception_vector(p)
    _main_with_hook(p)
    _support_routines(p)
    _debug_rom(p, regs)
    _data_sections(p, rng)

    return p


def create_template_instance(arch: ArchConfig,
                             regs: RegisterAllocation,
                             rng: Optional[random.Random] = None) -> TemplateInstance:
    """
    Build a template and pre-render the parts around the main hook.
    """
    program = build_template(arch, regs, rng)
    hook_idx = program.get_hook_idx(HOOK_MAIN)

    return TemplateInstance(
        header=program.render_slice(0, hook_idx),
        footer=program.render_slice(hook_idx + 1, len(program.nodes)),
        isa=arch.get_isa(),
        arch_bits=arch.get_arch_bits(),
        scratch_regs=tuple(regs.scratch),
    )
