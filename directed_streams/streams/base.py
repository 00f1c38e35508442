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
Common contract of the directed instruction streams.

A stream is created for one generated program, filled by generate(), then
finalized and checked. generate() reports either the produced instructions or
the reason it had nothing to do; a skip is a normal outcome, not an error.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from ..asm_template_manager.riscv_asm_syntex import ArchConfig
from ..instr_generator.instruction import DirectedInstr
from ..instr_generator.label_manager import LabelManager
from ..instr_generator.randomizer import Randomizer
from ..instr_generator.variables import RegisterAllocation
from .pmp import PmpConfigView

logger = logging.getLogger(__name__)


class StreamInvariantError(AssertionError):
    """A stream produced an inconsistent instruction list (generator defect)."""


@dataclass(frozen=True)
class Generated:
    instrs: Tuple[DirectedInstr, ...]
    skipped = False


@dataclass(frozen=True)
class Skipped:
    reason: str
    instrs: Tuple[DirectedInstr, ...] = ()
    skipped = True


StreamResult = Union[Generated, Skipped]


@dataclass
class GenContext:
    """
    Everything a stream may read while generating. Shared by all streams of
    one program; streams never modify the PMP view or the register pool.
    """
    pmp: PmpConfigView = field(default_factory=lambda: PmpConfigView.empty(16))
    regs: RegisterAllocation = field(default_factory=RegisterAllocation)
    rng: Randomizer = field(default_factory=Randomizer)
    labels: LabelManager = field(default_factory=LabelManager)
    arch: ArchConfig = field(default_factory=ArchConfig)


class DirectedStream:
    """
    Base class of all directed streams.

    Attributes:
        name:       unique stream name, used to derive labels
        label:      optional entry label placed on the first instruction by finalize()
        instr_list: instructions in program order
    """

    stream_type = "directed"

    def __init__(self, name: str, label: str = ""):
        if not name:
            raise ValueError("stream name cannot be empty")
        self.name = name
        self.label = label
        self.instr_list: List[Optional[DirectedInstr]] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, instrs={len(self.instr_list)})"

    def initialize(self, count: int) -> None:
        """Pre-allocate `count` empty slots; generate() must fill every one."""
        if count < 0:
            raise ValueError(f"count must be >= 0: {count}")
        self.instr_list = [None] * count

    def generate(self, ctx: GenContext, **constraints) -> StreamResult:
        raise NotImplementedError

    def finalize(self, ctx: GenContext) -> None:
        """
        Default post-generation step: the whole stream becomes one atomic
        block, per-instruction labels are dropped and the entry label (if any)
        moves to the first instruction.
        """
        for instr in self.instr_list:
            instr.label = None
            instr.atomic = True
        self._mark_boundaries()
        if self.label:
            self.instr_list[0].label = self.label

    def _mark_boundaries(self) -> None:
        if not self.instr_list:
            return
        if len(self.instr_list) == 1:
            self.instr_list[0].comment = self.name
            return
        self.instr_list[0].comment = f"Start {self.name}"
        self.instr_list[-1].comment = f"End {self.name}"

    def _check_filled(self) -> None:
        for idx, instr in enumerate(self.instr_list):
            if instr is None:
                raise StreamInvariantError(f"{self.name}: instruction slot {idx} was never filled")

    def check_labels(self) -> None:
        """
        Every slot is filled, no label is attached twice and every symbolic
        immediate names a label attached in this stream.

        Raises:
            StreamInvariantError: on any violation.
        """
        self._check_filled()

        counts = Counter(i.label for i in self.instr_list if i.label)
        dupes = sorted(lbl for lbl, n in counts.items() if n > 1)
        if dupes:
            raise StreamInvariantError(f"{self.name}: labels attached more than once: {dupes}")

        for instr in self.instr_list:
            ref = instr.symbolic_label()
            if ref is not None and ref not in counts:
                raise StreamInvariantError(f"{self.name}: '{instr.text()}' references unknown label '{ref}'")

    def run(self, ctx: GenContext, **constraints) -> StreamResult:
        """
        generate -> finalize -> check_labels.

        Returns:
            Generated with the final instruction list, or the Skipped from generate().
        """
        result = self.generate(ctx, **constraints)
        if result.skipped:
            self.instr_list = []
            logger.warning(f"[{self.name}] skipped: {result.reason}")
            return result
        self._check_filled()
        self.finalize(ctx)
        self.check_labels()
        logger.debug(f"[{self.name}] generated {len(self.instr_list)} instructions")
        return Generated(tuple(self.instr_list))
