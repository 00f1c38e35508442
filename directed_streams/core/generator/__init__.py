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
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import List

from tqdm import tqdm

from .generate_streams import (
    DEFAULT_STREAM_MIX,
    GenerationSettings,
    SeedSummary,
    build_context,
    generate_program,
)

logger = logging.getLogger(__name__)


def generate_programs_parallel(seed_times: int,
                               settings: GenerationSettings,
                               max_workers: int = 1) -> List[SeedSummary]:
    """
    Generate `seed_times` programs, one process per seed.

    Every seed builds its own GenContext, so nothing is shared between
    processes. A seed that raises is reported and left out of the result.

    Args:
        seed_times: Number of seeds to generate
        settings: Generation settings shared by every seed
        max_workers: Maximum number of parallel processes (1 runs in-process)

    Returns:
        Summaries of the seeds that were written, ordered by seed index
    """
    summaries: List[SeedSummary] = []
    failed = 0

    print("---Start generate directed streams---")
    if max_workers <= 1:
        for seed_idx in tqdm(range(seed_times), desc="# Generating programs"):
            try:
                summaries.append(generate_program(seed_idx, settings))
            except Exception:
                failed += 1
                logger.exception(f"Seed {seed_idx} failed")
    else:
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(generate_program, idx, settings): idx
                       for idx in range(seed_times)}
            for future in tqdm(as_completed(futures), total=len(futures),
                               desc="# Generating programs"):
                seed_idx = futures[future]
                try:
                    summaries.append(future.result())
                except Exception:
                    failed += 1
                    logger.exception(f"Seed {seed_idx} failed")

    summaries.sort(key=lambda s: s.seed_idx)
    skipped = sum(len(s.skipped) for s in summaries)
    per_type = {}
    for s in summaries:
        for stream_type, count in s.generated.items():
            per_type[stream_type] = per_type.get(stream_type, 0) + count

    print(f"# Successfully generated: {len(summaries)}/{seed_times} seeds")
    if failed:
        print(f"# Failed seeds: {failed}")
    for stream_type in sorted(per_type):
        print(f"#   {stream_type}: {per_type[stream_type]} streams")
    print(f"# Skipped streams (constraint unsatisfiable): {skipped}")
    return summaries


__all__ = [
    "DEFAULT_STREAM_MIX",
    "GenerationSettings",
    "SeedSummary",
    "build_context",
    "generate_program",
    "generate_programs_parallel",
]
