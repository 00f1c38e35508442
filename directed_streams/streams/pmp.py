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
Read-only view of the PMP configuration a test runs under, plus the NAPOT
address-field arithmetic shared by the PMP streams.

NAPOT encoding: the pmpaddr field holds address bits [33:2]; a run of k
trailing one bits selects a naturally aligned region of 2^(k+3) bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..instr_generator.randomizer import Randomizer

logger = logging.getLogger(__name__)

ADDR_FIELD_MASK = 0xFFFFFFFF
NAPOT_MIN_SIZE = 8
NAPOT_DECODE_MAX_ITERS = 29


class PmpAddrMode(IntEnum):
    """pmpcfg.A field encodings"""
    OFF = 0
    TOR = 1
    NA4 = 2
    NAPOT = 3


@dataclass(frozen=True)
class PmpRegionCfg:
    addr_mode: PmpAddrMode = PmpAddrMode.OFF
    addr: int = 0
    read: bool = False
    write: bool = False
    execute: bool = False
    locked: bool = False

    def __post_init__(self):
        if not 0 <= self.addr <= ADDR_FIELD_MASK:
            raise ValueError(f"PMP address field out of 32-bit range: {self.addr:#x}")

    def cfg_byte(self) -> int:
        """The 8-bit pmpcfg entry of this region."""
        return (int(self.read)
                | int(self.write) << 1
                | int(self.execute) << 2
                | int(self.addr_mode) << 3
                | int(self.locked) << 7)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PmpRegionCfg":
        mode = data.get("mode", "OFF")
        if isinstance(mode, str):
            try:
                mode = PmpAddrMode[mode.upper()]
            except KeyError:
                raise ValueError(f"Unknown PMP address mode: {mode}") from None
        else:
            mode = PmpAddrMode(mode)
        perms = str(data.get("perms", ""))
        return cls(
            addr_mode=mode,
            addr=int(data.get("addr", 0)),
            read="r" in perms or bool(data.get("read", False)),
            write="w" in perms or bool(data.get("write", False)),
            execute="x" in perms or bool(data.get("execute", False)),
            locked=bool(data.get("locked", False)),
        )


@dataclass(frozen=True)
class PmpConfigView:
    """
    Per-region PMP configuration, index-aligned with pmpcfg/pmpaddr numbering.
    """
    regions: Tuple[PmpRegionCfg, ...] = ()

    @property
    def num_regions(self) -> int:
        return len(self.regions)

    def region(self, index: int) -> PmpRegionCfg:
        return self.regions[index]

    def mode(self, index: int) -> PmpAddrMode:
        return self.regions[index].addr_mode

    def addr(self, index: int) -> int:
        return self.regions[index].addr

    def napot_regions(self) -> List[int]:
        return [i for i, r in enumerate(self.regions) if r.addr_mode == PmpAddrMode.NAPOT]

    @classmethod
    def empty(cls, num_regions: int) -> "PmpConfigView":
        return cls(tuple(PmpRegionCfg() for _ in range(num_regions)))

    @classmethod
    def from_regions(cls, num_regions: int, configured: Dict[int, PmpRegionCfg]) -> "PmpConfigView":
        """Build a view of `num_regions` regions, OFF except for `configured`."""
        for idx in configured:
            if not 0 <= idx < num_regions:
                raise ValueError(f"PMP region index {idx} outside 0..{num_regions - 1}")
        return cls(tuple(configured.get(i, PmpRegionCfg()) for i in range(num_regions)))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PmpConfigView":
        """
        Build from a mapping such as:
            {'num_regions': 16,
             'regions': [{'index': 2, 'mode': 'NAPOT', 'addr': 0x20000007, 'perms': 'rw'}]}
        """
        num_regions = int(data.get("num_regions", 16))
        configured: Dict[int, PmpRegionCfg] = {}
        for entry in data.get("regions") or []:
            if "index" not in entry:
                raise ValueError(f"PMP region entry without index: {entry}")
            idx = int(entry["index"])
            if idx in configured:
                raise ValueError(f"PMP region {idx} configured twice")
            configured[idx] = PmpRegionCfg.from_dict(entry)
        return cls.from_regions(num_regions, configured)


@dataclass(frozen=True)
class NapotGeometry:
    bottom: int
    top: int
    size: int


def decode_napot(addr: int) -> NapotGeometry:
    """
    Decode a NAPOT pmpaddr field into byte boundaries.

    Each trailing one bit doubles the region size starting from 8 bytes and
    widens the mask that clears the run. The walk stops after
    NAPOT_DECODE_MAX_ITERS steps; a field whose run reaches that bound is
    accepted as the largest representable region.
    """
    size = NAPOT_MIN_SIZE
    mask = 0xFFFFFFFE
    work = addr
    for _ in range(NAPOT_DECODE_MAX_ITERS):
        if not work & 1:
            break
        size <<= 1
        work >>= 1
        mask = (mask << 1) & ADDR_FIELD_MASK
    else:
        logger.debug(f"NAPOT decode of {addr:#x} reached the iteration bound, size={size:#x}")

    bottom = (addr & mask) << 2
    return NapotGeometry(bottom=bottom, top=bottom + size, size=size)


def encode_napot_addr(base: int, size: int) -> int:
    """
    Encode a naturally aligned region as a NAPOT pmpaddr field.

    Raises:
        ValueError: size is not a power of two >= 8, or base is not aligned to size.
    """
    if size < NAPOT_MIN_SIZE or size & (size - 1):
        raise ValueError(f"NAPOT size must be a power of two >= 8: {size}")
    if base % size:
        raise ValueError(f"NAPOT base {base:#x} is not aligned to size {size:#x}")
    addr = (base >> 2) | ((size >> 3) - 1)
    if addr > ADDR_FIELD_MASK:
        raise ValueError(f"NAPOT region {base:#x}+{size:#x} does not fit the address field")
    return addr


def random_pmp_config(rng: Randomizer,
                      num_regions: int = 16,
                      napot_weight: float = 0.5,
                      base_range: Tuple[int, int] = (0x8000_0000, 0x8010_0000),
                      size_log2_range: Tuple[int, int] = (3, 12)) -> PmpConfigView:
    """
    Randomize a PMP configuration. Each region is NAPOT with probability
    `napot_weight`, otherwise OFF/TOR/NA4 with equal weight.
    """
    regions = []
    other_modes = [PmpAddrMode.OFF, PmpAddrMode.TOR, PmpAddrMode.NA4]
    for _ in range(num_regions):
        perms = rng.randint(0, 7)
        if rng.random() < napot_weight:
            size = 1 << rng.randint(*size_log2_range)
            lo, hi = base_range
            base = rng.randint(lo // size, (hi - size) // size) * size
            regions.append(PmpRegionCfg(PmpAddrMode.NAPOT, encode_napot_addr(base, size),
                                        bool(perms & 1), bool(perms & 2), bool(perms & 4)))
        else:
            mode = rng.choice(other_modes)
            addr = rng.randint(base_range[0] >> 2, base_range[1] >> 2) if mode != PmpAddrMode.OFF else 0
            regions.append(PmpRegionCfg(mode, addr, bool(perms & 1), bool(perms & 2), bool(perms & 4)))
    return PmpConfigView(tuple(regions))


def describe(view: PmpConfigView, indices: Optional[Iterable[int]] = None) -> str:
    """One line per region, for logs."""
    lines = []
    for i in (indices if indices is not None else range(view.num_regions)):
        r = view.region(i)
        line = f"pmp{i}: {r.addr_mode.name} addr={r.addr:#010x} cfg={r.cfg_byte():#04x}"
        if r.addr_mode == PmpAddrMode.NAPOT:
            g = decode_napot(r.addr)
            line += f" [{g.bottom:#x}, {g.top:#x})"
        lines.append(line)
    return "\n".join(lines)
