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

import argparse
import os
from pathlib import Path
from typing import Dict, List, Optional

from ..streams import available_streams


def parse_stream_mix(items: Optional[List[str]]) -> Optional[Dict[str, int]]:
    """
    Parse ['breakpoint=2', 'napot_setup'] into {'breakpoint': 2, 'napot_setup': 1}.
    """
    if items is None:
        return None
    known = available_streams()
    mix: Dict[str, int] = {}
    for item in items:
        name, _, count = item.partition('=')
        if name not in known:
            raise ValueError(f"Unknown stream '{name}', choose from {', '.join(known)}")
        try:
            value = int(count) if count else 1
        except ValueError:
            raise ValueError(f"Invalid count in '{item}'") from None
        if value < 0:
            raise ValueError(f"Stream count must be >= 0 in '{item}'")
        mix[name] = value
    return mix


def create_parser():
    parser = argparse.ArgumentParser(
        description='Generate directed RISC-V instruction streams for trigger, mseccfg and PMP boundary testing.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # -- configuration file --
    parser.add_argument('--config', type=Path, default=None,
                        help='YAML file with stream mix, scratch registers and PMP regions'
    )

    # -- workload configuration --
    parser.add_argument(
        '--seeds', type=int,
        default=None,
        metavar='K',
        help='Number of programs generated (default 10)'
    )
    parser.add_argument(
        '--instr-number', type=int,
        default=None,
        metavar='N',
        help='Number of random filler instructions in each program body (default 200)'
    )
    parser.add_argument(
        '--streams', nargs='*', default=None, metavar='NAME[=COUNT]',
        help=f'Streams per program, from: {", ".join(available_streams())}'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Base random seed; seed i uses base+i'
    )
    parser.add_argument(
        '--max-workers', type=int,
        default=os.cpu_count() or 4,
        help='Number of parallel processes'
    )

    # -- target configuration --
    parser.add_argument('--rv32', action='store_true',
                        help='RV32 environments'
    )
    parser.add_argument('--num-pmp-regions', type=int, default=16,
                        help='PMP regions when the PMP configuration is randomized'
    )
    parser.add_argument('--scratch-regs', nargs='+', default=None, metavar='REG',
                        help='Registers reserved for the streams (index 1 stages addresses)'
    )

    # -- output / logging --
    parser.add_argument(
        '--out-dir', type=Path,
        default=Path('out-directed'),
        help='Output directory for the generated .S files'
    )
    parser.add_argument('--log-file', type=str, default=None,
                        help='Also write the log to this file'
    )
    parser.add_argument('--debug', action='store_true',
                        help='Debug-level logging'
    )
    parser.add_argument('--seed-logs', action='store_true',
                        help='Write a debug log next to every generated program (directed_<idx>.log)'
    )

    return parser


def parse_args(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)
    try:
        args.streams = parse_stream_mix(args.streams)
    except ValueError as e:
        parser.error(str(e))
    return args
