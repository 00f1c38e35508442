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
import os
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ...asm_template_manager import create_template_instance
from ...config.logger_config import seed_log_handler
from ...asm_template_manager.riscv_asm_syntex import ArchConfig
from ...instr_generator.label_manager import LabelManager
from ...instr_generator.randomizer import Randomizer
from ...instr_generator.variables import RegisterAllocation, DEFAULT_SCRATCH_REGS
from ...streams import GenContext, PmpConfigView, create_stream, random_pmp_config
from ...streams.pmp import describe
from ..program_builder import build_main_body, render_program

logger = logging.getLogger(__name__)

DEFAULT_STREAM_MIX = {
    'breakpoint': 1,
    'security_config': 2,
    'napot_setup': 1,
    'cross_pmp_access': 2,
}


@dataclass(frozen=True)
class GenerationSettings:
    """
    Everything one seed needs. Passed to worker processes, so it must pickle.
    """
    instr_number: int = 200
    stream_mix: Tuple[Tuple[str, int], ...] = tuple(DEFAULT_STREAM_MIX.items())
    scratch_regs: Tuple[str, ...] = DEFAULT_SCRATCH_REGS
    num_pmp_regions: int = 16
    pmp: Optional[PmpConfigView] = None
    arch: ArchConfig = field(default_factory=ArchConfig)
    base_seed: Optional[int] = None
    out_dir: str = "out-directed"
    seed_logs: bool = False


@dataclass
class SeedSummary:
    seed_idx: int
    path: str
    generated: Dict[str, int] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)


def build_context(seed_idx: int, settings: GenerationSettings) -> GenContext:
    seed = None if settings.base_seed is None else settings.base_seed + seed_idx
    rng = Randomizer(seed)
    pmp = settings.pmp or random_pmp_config(rng, settings.num_pmp_regions)
    return GenContext(
        pmp=pmp,
        regs=RegisterAllocation(tuple(settings.scratch_regs)),
        rng=rng,
        labels=LabelManager(),
        arch=settings.arch,
    )


def generate_program(seed_idx: int, settings: GenerationSettings) -> SeedSummary:
    """
    Generate one seed: run the configured streams, merge them into a random
    body, render into the template and write '<out_dir>/directed_<idx>.S'.
    With `settings.seed_logs` the seed's log goes to 'directed_<idx>.log' too.
    """
    if settings.seed_logs:
        with seed_log_handler(settings.out_dir, seed_idx):
            return _generate_program(seed_idx, settings)
    return _generate_program(seed_idx, settings)


def _generate_program(seed_idx: int, settings: GenerationSettings) -> SeedSummary:
    ctx = build_context(seed_idx, settings)
    logger.debug(f"[Seed {seed_idx}] PMP configuration:\n{describe(ctx.pmp)}")

    summary = SeedSummary(seed_idx=seed_idx,
                          path=os.path.join(settings.out_dir, f"directed_{seed_idx}.S"))
    stream_instrs = []
    for stream_type, count in settings.stream_mix:
        for _ in range(count):
            stream = create_stream(stream_type, ctx)
            result = stream.run(ctx)
            if result.skipped:
                summary.skipped.append(f"{stream.name}: {result.reason}")
                continue
            summary.generated[stream_type] = summary.generated.get(stream_type, 0) + 1
            stream_instrs.append(result.instrs)

    body = build_main_body(settings.instr_number, stream_instrs, ctx.rng, ctx.regs)

    template_seed = None if settings.base_seed is None else settings.base_seed + seed_idx
    template = create_template_instance(ctx.arch, ctx.regs, random.Random(template_seed))
    text = render_program(template, body, ctx.arch)

    os.makedirs(settings.out_dir, exist_ok=True)
    with open(summary.path, "w", encoding="utf-8") as f:
        f.write(text)
    return summary
