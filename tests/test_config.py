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

from directed_streams.config.cli_parser import parse_args, parse_stream_mix
from directed_streams.config.config_manager import Config
from directed_streams.config.stream_config import StreamConfig
from directed_streams.core.generator import DEFAULT_STREAM_MIX
from directed_streams.streams import PmpAddrMode

CONFIG_YAML = """\
seeds: 3
instr_number: 40
streams:
  breakpoint: 2
  cross_pmp_access: 1
scratch_regs: [s8, s9]
pmp:
  num_regions: 8
  regions:
    - {index: 2, mode: NAPOT, addr: 0x20000007, perms: rw}
    - {index: 4, mode: TOR, addr: 0x100}
"""


def _write_config(tmp_path, text=CONFIG_YAML):
    path = tmp_path / "streams.yaml"
    path.write_text(text)
    return path


def test_stream_config_from_yaml(tmp_path):
    cfg = StreamConfig.from_yaml(str(_write_config(tmp_path)))
    assert cfg.seeds == 3
    assert cfg.instr_number == 40
    assert cfg.streams == {'breakpoint': 2, 'cross_pmp_access': 1}
    assert cfg.scratch_regs == ['s8', 's9']
    assert cfg.pmp.num_regions == 8
    assert cfg.pmp.mode(2) == PmpAddrMode.NAPOT
    assert cfg.pmp.addr(2) == 0x20000007
    assert cfg.pmp.mode(4) == PmpAddrMode.TOR


def test_stream_config_empty_file(tmp_path):
    cfg = StreamConfig.from_yaml(str(_write_config(tmp_path, "")))
    assert cfg == StreamConfig()


def test_stream_config_rejects_negative_counts():
    with pytest.raises(ValueError):
        StreamConfig.from_dict({'streams': {'breakpoint': -1}})
    with pytest.raises(ValueError):
        StreamConfig.from_dict(['not', 'a', 'mapping'])


def test_parse_stream_mix():
    assert parse_stream_mix(None) is None
    assert parse_stream_mix(['breakpoint=2', 'napot_setup']) == {'breakpoint': 2, 'napot_setup': 1}
    with pytest.raises(ValueError):
        parse_stream_mix(['nonsense=1'])
    with pytest.raises(ValueError):
        parse_stream_mix(['breakpoint=two'])


def test_parse_args_rejects_unknown_stream():
    with pytest.raises(SystemExit):
        parse_args(['--streams', 'nonsense'])


def test_defaults(tmp_path):
    config = Config(parse_args(['--out-dir', str(tmp_path)]))
    assert config.seed_times == 10
    assert config.instr_number == 200
    assert config.stream_mix == DEFAULT_STREAM_MIX
    assert config.isa == 'rv64gc_zicsr_zifencei'
    assert config.pmp is None

    settings = config.generation_settings()
    assert settings.num_pmp_regions == 16
    assert settings.scratch_regs == ('s10', 's11')
    assert settings.out_dir == str(tmp_path.resolve())


def test_command_line_overrides_file(tmp_path):
    path = _write_config(tmp_path)
    config = Config(parse_args(['--config', str(path), '--seeds', '5', '--rv32',
                                '--streams', 'security_config=4']))
    assert config.seed_times == 5
    assert config.instr_number == 40
    assert config.stream_mix == {'security_config': 4}
    assert config.scratch_regs == ('s8', 's9')
    assert config.arch.arch_bits == 32
    assert config.isa == 'rv32gc_zicsr_zifencei'

    settings = config.generation_settings()
    assert settings.num_pmp_regions == 8
    assert settings.pmp.mode(2) == PmpAddrMode.NAPOT
    assert settings.stream_mix == (('security_config', 4),)


def test_num_pmp_regions_range(tmp_path):
    with pytest.raises(ValueError):
        Config(parse_args(['--num-pmp-regions', '17']))


def test_seed_logs_flag(tmp_path):
    config = Config(parse_args(['--seed-logs', '--out-dir', str(tmp_path)]))
    assert config.generation_settings().seed_logs
    assert not Config(parse_args([])).generation_settings().seed_logs


def test_unknown_stream_in_file_is_rejected(tmp_path):
    path = _write_config(tmp_path, "streams:\n  bogus_stream: 1\n")
    with pytest.raises(ValueError, match="bogus_stream"):
        StreamConfig.from_yaml(str(path))
    with pytest.raises(ValueError):
        Config(parse_args(['--config', str(path), '--out-dir', str(tmp_path)]))
