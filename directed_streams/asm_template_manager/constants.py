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

# ------------------------------------------------------------------------------
# Hook Constants
# ------------------------------------------------------------------------------
HOOK_MAIN             = "MAIN_BODY_HOOK"

# Label constants
LBL_START             = "_start"
LBL_TRAP_VEC_INIT     = "trap_vec_init"
LBL_PMP_SETUP         = "pmp_setup"
LBL_INIT              = "init"
LBL_OTHER_EXP         = "other_exp"
LBL_MAIN              = "main"
LBL_WRITE_TOHOST      = "write_tohost"
LBL_EXIT              = "_exit"
LBL_DEBUG_ROM         = "debug_rom"
LBL_DEBUG_TRIGGER_HIT = "debug_trigger_hit"
LBL_DEBUG_EXIT        = "debug_exit"

# Data symbols
SYM_TOHOST            = "tohost"
SYM_FROMHOST          = "fromhost"
SYM_REGION0           = "region_0"

# Trigger module
DCSR_CAUSE_SHIFT      = 6
DCSR_CAUSE_MASK       = 0x7
DCSR_CAUSE_TRIGGER    = 2
MCONTROL_TYPE         = 2
MCONTROL_ACTION_DEBUG = 1 << 12
MCONTROL_M            = 1 << 6
MCONTROL_EXECUTE      = 1 << 2

# PMP entry granting RWX over the whole address space (A=NAPOT)
PMP_ALLOW_ALL_CFG     = 0x1F
PMP_ALLOW_ALL_REGION  = 15
