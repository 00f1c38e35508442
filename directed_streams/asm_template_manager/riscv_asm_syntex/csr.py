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
from enum import IntEnum

class CSR(IntEnum):
    """
    CSR addresses touched by the directed streams and the test template.
    Only machine-level, PMP, Smepmp and debug/trigger registers are listed.
    """

    # Machine-level core set
    MSTATUS     = 0x300
    MISA        = 0x301
    MIE         = 0x304
    MTVEC       = 0x305
    MSCRATCH    = 0x340
    MEPC        = 0x341
    MCAUSE      = 0x342
    MTVAL       = 0x343
    MHARTID     = 0xF14

    # Smepmp machine security configuration
    MSECCFG     = 0x747
    MSECCFGH    = 0x757   # RV32 only

    # PMP configuration (odd indices exist on RV32 only)
    PMPCFG0     = 0x3A0
    PMPCFG1     = 0x3A1
    PMPCFG2     = 0x3A2
    PMPCFG3     = 0x3A3

    # PMP address registers
    PMPADDR0    = 0x3B0
    PMPADDR1    = 0x3B1
    PMPADDR2    = 0x3B2
    PMPADDR3    = 0x3B3
    PMPADDR4    = 0x3B4
    PMPADDR5    = 0x3B5
    PMPADDR6    = 0x3B6
    PMPADDR7    = 0x3B7
    PMPADDR8    = 0x3B8
    PMPADDR9    = 0x3B9
    PMPADDR10   = 0x3BA
    PMPADDR11   = 0x3BB
    PMPADDR12   = 0x3BC
    PMPADDR13   = 0x3BD
    PMPADDR14   = 0x3BE
    PMPADDR15   = 0x3BF

    # Trigger module (Sdtrig)
    TSELECT     = 0x7A0
    TDATA1      = 0x7A1
    TDATA2      = 0x7A2
    TDATA3      = 0x7A3
    TINFO       = 0x7A4

    # Debug mode (Sdext)
    DCSR        = 0x7B0
    DPC         = 0x7B1
    DSCRATCH0   = 0x7B2
    DSCRATCH1   = 0x7B3


PMP_MAX_REGIONS = 16


def pmpaddr(index: int) -> CSR:
    """Return the pmpaddr<index> CSR."""
    if not 0 <= index < PMP_MAX_REGIONS:
        raise ValueError(f"PMP region index out of range: {index}")
    return CSR(CSR.PMPADDR0 + index)


def pmpcfg(index: int, arch_bits: int = 64) -> CSR:
    """
    Return the pmpcfg CSR holding the configuration byte of region <index>.
    RV64 packs eight regions per even-numbered pmpcfg, RV32 packs four.
    """
    if not 0 <= index < PMP_MAX_REGIONS:
        raise ValueError(f"PMP region index out of range: {index}")
    if arch_bits == 64:
        return CSR(CSR.PMPCFG0 + (index // 8) * 2)
    return CSR(CSR.PMPCFG0 + index // 4)
