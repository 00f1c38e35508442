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
Label Manager for Directed Instruction Streams

Directed streams are generated independently and only merged into one program
afterwards, so every label they attach must be unique across the program.
This module hands out:
1. Unique stream names (breakpoint_0, napot_setup_1, ...)
2. Labels derived from a stream name (breakpoint_0_bkpt)
3. Labels with a random suffix (napot_region_3fa2c011)
Every label handed out is recorded; claiming the same name twice is an error.
"""

from typing import Dict, Set

from .randomizer import Randomizer

# Retries before giving up on finding a free random label
MAX_RANDOM_LABEL_TRIES = 64


class LabelManager:
    """
    Tracks stream names and labels for one generated program.
    """

    def __init__(self):
        """Initialize the label manager."""
        self.stream_counters: Dict[str, int] = {}
        self.used_labels: Set[str] = set()

    def generate_stream_name(self, prefix: str) -> str:
        """
        Generate a unique stream name.

        Returns:
            str: Name like "breakpoint_0", "breakpoint_1", etc.
        """
        counter = self.stream_counters.get(prefix, 0)
        self.stream_counters[prefix] = counter + 1
        return f"{prefix}_{counter}"

    def claim(self, label: str) -> str:
        """
        Record `label` as used.

        Raises:
            ValueError: If the label was already handed out.
        """
        if not label:
            raise ValueError("label cannot be empty")
        if label in self.used_labels:
            raise ValueError(f"Label '{label}' is already in use")
        self.used_labels.add(label)
        return label

    def derive_label(self, stream_name: str, suffix: str) -> str:
        """
        Claim a label derived from a stream's unique name.

        Returns:
            str: Label like "breakpoint_0_bkpt".
        """
        return self.claim(f"{stream_name}_{suffix}")

    def generate_random_label(self, prefix: str, rng: Randomizer, bits: int = 32) -> str:
        """
        Claim a label made of `prefix` and a random hex suffix.

        Returns:
            str: Label like "napot_region_3fa2c011".
        """
        width = (bits + 3) // 4
        for _ in range(MAX_RANDOM_LABEL_TRIES):
            label = f"{prefix}_{rng.getrandbits(bits):0{width}x}"
            if label not in self.used_labels:
                return self.claim(label)
        raise ValueError(f"Could not find a free label for prefix '{prefix}'")

    def is_used(self, label: str) -> bool:
        return label in self.used_labels
