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

import pytest

from directed_streams.instr_generator.label_manager import LabelManager
from directed_streams.instr_generator.randomizer import Randomizer


def test_stream_names_count_per_prefix():
    labels = LabelManager()
    assert labels.generate_stream_name("breakpoint") == "breakpoint_0"
    assert labels.generate_stream_name("napot_setup") == "napot_setup_0"
    assert labels.generate_stream_name("breakpoint") == "breakpoint_1"


def test_claim_twice():
    labels = LabelManager()
    labels.claim("x")
    with pytest.raises(ValueError):
        labels.claim("x")
    with pytest.raises(ValueError):
        labels.claim("")


def test_derive_label():
    labels = LabelManager()
    assert labels.derive_label("breakpoint_0", "bkpt") == "breakpoint_0_bkpt"
    assert labels.is_used("breakpoint_0_bkpt")


def test_random_labels():
    labels = LabelManager()
    rng = Randomizer(0)
    generated = [labels.generate_random_label("region", rng) for _ in range(50)]
    assert len(set(generated)) == 50
    for label in generated:
        prefix, suffix = label.rsplit("_", 1)
        assert prefix == "region"
        assert len(suffix) == 8
        int(suffix, 16)


def test_random_label_gives_up_when_exhausted():
    labels = LabelManager()
    rng = Randomizer(0)
    labels.claim("tiny_0")
    labels.claim("tiny_1")
    with pytest.raises(ValueError):
        labels.generate_random_label("tiny", rng, bits=1)
