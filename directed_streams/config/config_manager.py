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

import logging

from ..asm_template_manager.riscv_asm_syntex import ArchConfig
from ..core.generator import DEFAULT_STREAM_MIX, GenerationSettings
from ..instr_generator.variables import DEFAULT_SCRATCH_REGS
from ..asm_template_manager.riscv_asm_syntex.csr import PMP_MAX_REGIONS
from .stream_config import StreamConfig

config_logger = logging.getLogger(__name__)

# Key: XLEN, Value: -march string of the generated programs
ISA_PROFILES = {
    32: 'rv32gc_zicsr_zifencei',
    64: 'rv64gc_zicsr_zifencei',
}

DEFAULT_SEEDS = 10
DEFAULT_INSTR_NUMBER = 200


class Config:
    """
    Run configuration. Command line flags win over the YAML file, which wins
    over the built-in defaults.
    """
    def __init__(self, args):
        file_cfg = StreamConfig.from_yaml(args.config) if args.config else StreamConfig()

        self.is_rv32 = bool(args.rv32)
        self.debug_enabled = bool(args.debug)
        self.log_file = args.log_file
        self.seed_logs = bool(args.seed_logs)

        self.seed_times = int(self._pick(args.seeds, file_cfg.seeds, DEFAULT_SEEDS))
        self.instr_number = int(self._pick(args.instr_number, file_cfg.instr_number, DEFAULT_INSTR_NUMBER))
        if self.seed_times < 0:
            raise ValueError(f"--seeds must be >= 0: {self.seed_times}")
        if self.instr_number < 0:
            raise ValueError(f"--instr-number must be >= 0: {self.instr_number}")

        self.stream_mix = dict(self._pick(args.streams, file_cfg.streams, DEFAULT_STREAM_MIX))
        self.scratch_regs = tuple(self._pick(args.scratch_regs, file_cfg.scratch_regs, DEFAULT_SCRATCH_REGS))

        # A fixed PMP configuration from the file overrides randomization
        self.pmp = file_cfg.pmp
        self.num_pmp_regions = int(args.num_pmp_regions)
        if not 0 <= self.num_pmp_regions <= PMP_MAX_REGIONS:
            raise ValueError(f"--num-pmp-regions must be in [0, {PMP_MAX_REGIONS}]: {self.num_pmp_regions}")

        self.base_seed = args.seed
        self.max_workers = max(1, int(args.max_workers))
        self.out_dir = args.out_dir.resolve()

        self.arch_bits = 32 if self.is_rv32 else 64
        self.isa = ISA_PROFILES[self.arch_bits]
        self.arch = ArchConfig(self.arch_bits, self.isa)

    @staticmethod
    def _pick(cli_value, file_value, default):
        if cli_value is not None:
            return cli_value
        if file_value is not None:
            return file_value
        return default

    def generation_settings(self) -> GenerationSettings:
        return GenerationSettings(
            instr_number=self.instr_number,
            stream_mix=tuple(self.stream_mix.items()),
            scratch_regs=self.scratch_regs,
            num_pmp_regions=self.pmp.num_regions if self.pmp else self.num_pmp_regions,
            pmp=self.pmp,
            arch=self.arch,
            base_seed=self.base_seed,
            out_dir=str(self.out_dir),
            seed_logs=self.seed_logs,
        )


def setup_config(args):
    return Config(args)
