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

from directed_streams.streams import (
    PmpAddrMode,
    PmpConfigView,
    PmpRegionCfg,
    decode_napot,
    encode_napot_addr,
    random_pmp_config,
)
from directed_streams.instr_generator.randomizer import Randomizer


@pytest.mark.parametrize("ones", range(0, 30))
def test_decode_size_doubles_per_trailing_one(ones):
    geometry = decode_napot((1 << ones) - 1)
    assert geometry.size == 8 << ones
    assert geometry.bottom == 0
    assert geometry.top == geometry.size


def test_decode_three_trailing_ones():
    geometry = decode_napot(0b0111)
    assert geometry.size == 64
    assert geometry.bottom == 0
    assert geometry.top == 64


def test_decode_no_trailing_ones():
    geometry = decode_napot(2)
    assert (geometry.bottom, geometry.top, geometry.size) == (8, 16, 8)
    geometry = decode_napot(4)
    assert (geometry.bottom, geometry.top) == (16, 24)


def test_decode_run_longer_than_bound_stops_at_bound():
    assert decode_napot(0x3FFFFFFF).size == decode_napot(0x1FFFFFFF).size == 8 << 29


def test_decode_keeps_base_above_run():
    addr = encode_napot_addr(0x8000_1000, 0x100)
    geometry = decode_napot(addr)
    assert geometry.bottom == 0x8000_1000
    assert geometry.top == 0x8000_1100


@pytest.mark.parametrize("base,size", [(0x8000_0000, 4), (0x8000_0000, 24), (0x8000_0004, 8)])
def test_encode_rejects_bad_regions(base, size):
    with pytest.raises(ValueError):
        encode_napot_addr(base, size)


def test_region_cfg_byte():
    cfg = PmpRegionCfg(PmpAddrMode.NAPOT, 0, read=True, write=True, execute=False, locked=True)
    assert cfg.cfg_byte() == 0x80 | 0x18 | 0x3


def test_region_addr_range_checked():
    with pytest.raises(ValueError):
        PmpRegionCfg(PmpAddrMode.NAPOT, 1 << 32)


def test_view_from_dict():
    view = PmpConfigView.from_dict({
        'num_regions': 8,
        'regions': [
            {'index': 2, 'mode': 'napot', 'addr': 0x20000007, 'perms': 'rw'},
            {'index': 5, 'mode': 1, 'addr': 0x100},
        ],
    })
    assert view.num_regions == 8
    assert view.mode(2) == PmpAddrMode.NAPOT
    assert view.region(2).read and view.region(2).write and not view.region(2).execute
    assert view.mode(5) == PmpAddrMode.TOR
    assert view.mode(0) == PmpAddrMode.OFF
    assert view.napot_regions() == [2]


def test_view_from_dict_errors():
    with pytest.raises(ValueError):
        PmpConfigView.from_dict({'num_regions': 4, 'regions': [{'index': 4, 'mode': 'NAPOT'}]})
    with pytest.raises(ValueError):
        PmpConfigView.from_dict({'regions': [{'index': 1}, {'index': 1}]})
    with pytest.raises(ValueError):
        PmpConfigView.from_dict({'regions': [{'index': 1, 'mode': 'BOGUS'}]})


def test_random_config_napot_regions_decode_inside_base_range():
    view = random_pmp_config(Randomizer(7), num_regions=16, napot_weight=1.0)
    assert view.num_regions == 16
    assert view.napot_regions() == list(range(16))
    for idx in view.napot_regions():
        geometry = decode_napot(view.addr(idx))
        assert 0x8000_0000 <= geometry.bottom < geometry.top <= 0x8010_0000
