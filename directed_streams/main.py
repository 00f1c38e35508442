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
import sys
import time

from .config.cli_parser import parse_args
from .config.config_manager import setup_config
from .config.logger_config import setup_logging
from .core.generator import generate_programs_parallel

logger = logging.getLogger(__name__)


def write_isa_info(out_dir: str, isa: str, arch_bits: int):
    """
    Write ISA information next to the generated programs so the assembler
    and simulator invocations match the generator's target.
    """
    os.makedirs(out_dir, exist_ok=True)
    isa_file = os.path.join(out_dir, ".isa_info")
    with open(isa_file, 'w') as f:
        f.write(f"ISA={isa}\n")
        f.write(f"ARCH_BITS={arch_bits}\n")


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, logging.DEBUG if args.debug else logging.INFO)

    try:
        config = setup_config(args)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    logger.info(f"Generating {config.seed_times} programs for {config.isa} into {config.out_dir}")
    start_time = time.time()
    summaries = generate_programs_parallel(
        config.seed_times,
        config.generation_settings(),
        config.max_workers,
    )
    write_isa_info(str(config.out_dir), config.isa, config.arch_bits)
    print("# Execution time: %.2f seconds" % (time.time() - start_time))

    return 0 if len(summaries) == config.seed_times else 1


if __name__ == "__main__":
    sys.exit(main())
