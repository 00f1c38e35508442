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

import pytest

from directed_streams.config.logger_config import PACKAGE_LOGGER, seed_log_handler
from directed_streams.core.generator import (
    GenerationSettings,
    build_context,
    generate_program,
    generate_programs_parallel,
)
from directed_streams.main import main
from directed_streams.streams import PmpConfigView

FIXED_PMP = PmpConfigView.from_dict({
    'num_regions': 16,
    'regions': [{'index': 3, 'mode': 'NAPOT', 'addr': 0x20000007, 'perms': 'rw'}],
})


def _settings(tmp_path, **kwargs):
    kwargs.setdefault('instr_number', 50)
    kwargs.setdefault('base_seed', 11)
    return GenerationSettings(out_dir=str(tmp_path), **kwargs)


def test_generate_program_writes_file(tmp_path):
    summary = generate_program(0, _settings(tmp_path, pmp=FIXED_PMP))
    assert summary.path == str(tmp_path / "directed_0.S")
    assert summary.generated == {'breakpoint': 1, 'security_config': 2,
                                 'napot_setup': 1, 'cross_pmp_access': 2}
    assert summary.skipped == []

    text = (tmp_path / "directed_0.S").read_text()
    assert "breakpoint_0_bkpt+4" in text
    assert "0x747" in text
    assert "napot_setup_0_region_" in text
    assert "# Start cross_pmp_access_1" in text
    assert "debug_rom:" in text


def test_same_seed_same_program(tmp_path):
    first = tmp_path / "a"
    second = tmp_path / "b"
    generate_program(4, _settings(first))
    generate_program(4, _settings(second))
    assert (first / "directed_4.S").read_text() == (second / "directed_4.S").read_text()


def test_unsatisfiable_stream_is_reported(tmp_path):
    settings = _settings(tmp_path, pmp=PmpConfigView.empty(16),
                         stream_mix=(('cross_pmp_access', 2), ('security_config', 1)))
    summary = generate_program(0, settings)
    assert summary.generated == {'security_config': 1}
    assert len(summary.skipped) == 2
    assert summary.skipped[0].startswith("cross_pmp_access_0: ")


def test_context_per_seed(tmp_path):
    settings = _settings(tmp_path, num_pmp_regions=6, scratch_regs=('s2', 's3'))
    ctx = build_context(1, settings)
    assert ctx.pmp.num_regions == 6
    assert ctx.regs.addr_reg == 's3'
    assert ctx.rng.seed == 12


@pytest.mark.parametrize("workers", [1, 2])
def test_batch(tmp_path, workers):
    summaries = generate_programs_parallel(3, _settings(tmp_path, instr_number=20), max_workers=workers)
    assert [s.seed_idx for s in summaries] == [0, 1, 2]
    for idx in range(3):
        assert (tmp_path / f"directed_{idx}.S").exists()


def test_main(tmp_path):
    rc = main(['--seeds', '2', '--instr-number', '20', '--max-workers', '1',
               '--seed', '3', '--out-dir', str(tmp_path)])
    assert rc == 0
    assert (tmp_path / "directed_0.S").exists()
    assert (tmp_path / "directed_1.S").exists()
    assert (tmp_path / ".isa_info").read_text() == "ISA=rv64gc_zicsr_zifencei\nARCH_BITS=64\n"


def test_main_bad_config(tmp_path):
    assert main(['--config', str(tmp_path / "missing.yaml"), '--out-dir', str(tmp_path)]) == 2


def test_seed_log_file(tmp_path):
    summary = generate_program(2, _settings(tmp_path, pmp=FIXED_PMP, seed_logs=True))
    log_text = (tmp_path / "directed_2.log").read_text()
    assert "[Seed 2] PMP configuration" in log_text
    assert "pmp3: NAPOT" in log_text
    assert "[cross_pmp_access_0]" in log_text
    assert summary.skipped == []


def test_seed_log_handler_is_removed(tmp_path):
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    before = list(package_logger.handlers)
    with seed_log_handler(str(tmp_path), 0) as path:
        logging.getLogger("directed_streams.streams").debug("inside")
    logging.getLogger("directed_streams.streams").debug("outside")
    assert package_logger.handlers == before
    text = open(path).read()
    assert "inside" in text
    assert "outside" not in text


def test_main_rejects_unknown_stream_in_file(tmp_path):
    path = tmp_path / "streams.yaml"
    path.write_text("streams:\n  bogus_stream: 1\n")
    assert main(['--config', str(path), '--out-dir', str(tmp_path)]) == 2
