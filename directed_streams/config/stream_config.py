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

"""
YAML configuration of a generation run.

    seeds: 10
    instr_number: 200
    streams:
      breakpoint: 1
      security_config: 2
      napot_setup: 1
      cross_pmp_access: 2
    scratch_regs: [s10, s11]
    pmp:
      num_regions: 16
      regions:
        - {index: 2, mode: NAPOT, addr: 0x20000007, perms: rw}

Every key is optional. Without a `pmp` section each seed randomizes its own
PMP configuration.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from ..streams import PmpConfigView, available_streams, get_stream_class

config_logger = logging.getLogger(__name__)

KNOWN_KEYS = ("seeds", "instr_number", "streams", "scratch_regs", "pmp")


@dataclass
class StreamConfig:
    seeds: Optional[int] = None
    instr_number: Optional[int] = None
    streams: Optional[Dict[str, int]] = None
    scratch_regs: Optional[List[str]] = None
    pmp: Optional[PmpConfigView] = None

    def __post_init__(self):
        if self.streams is not None:
            for name, count in self.streams.items():
                try:
                    get_stream_class(name)
                except KeyError:
                    raise ValueError(f"Unknown stream '{name}' in configuration, "
                                     f"choose from {', '.join(available_streams())}") from None
                if int(count) < 0:
                    raise ValueError(f"Stream count for '{name}' must be >= 0: {count}")

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> 'StreamConfig':
        config_dict = config_dict or {}
        if not isinstance(config_dict, dict):
            raise ValueError(f"Configuration root must be a mapping, got {type(config_dict).__name__}")
        for key in config_dict:
            if key not in KNOWN_KEYS:
                config_logger.warning(f"Unknown configuration key ignored: {key}")

        streams = config_dict.get("streams")
        pmp = config_dict.get("pmp")
        scratch = config_dict.get("scratch_regs")
        return cls(
            seeds=config_dict.get("seeds"),
            instr_number=config_dict.get("instr_number"),
            streams={str(k): int(v) for k, v in streams.items()} if streams else None,
            scratch_regs=[str(r) for r in scratch] if scratch else None,
            pmp=PmpConfigView.from_dict(pmp) if pmp else None,
        )

    @classmethod
    def from_yaml(cls, file_path: str) -> 'StreamConfig':
        """ create a StreamConfig object from a yaml file """
        with open(file_path, 'r') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict)
