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

from directed_streams.asm_template_manager.riscv_asm_syntex import CSR
from directed_streams.streams import SecurityConfigStream
from directed_streams.streams.security_config_stream import decode_mseccfg


def test_single_csr_write(ctx):
    result = SecurityConfigStream("security_config_0").run(ctx)
    assert not result.skipped
    assert len(result.instrs) == 1

    instr = result.instrs[0]
    assert instr.name == 'csrrwi'
    assert instr.rd == 'zero'
    assert instr.csr == CSR.MSECCFG == 0x747
    assert 0 <= instr.imm.value <= 7
    assert not instr.atomic
    assert instr.label is None
    assert instr.comment == "security_config_0"
    assert instr.text() == f"csrrwi zero, 0x747, {instr.imm.value}"


def test_every_value_is_reachable(make_ctx):
    ctx = make_ctx(seed=3)
    seen = set()
    for n in range(400):
        seen.add(SecurityConfigStream(f"security_config_{n}").run(ctx).instrs[0].imm.value)
    assert seen == set(range(8))


def test_decode_bits():
    assert decode_mseccfg(0b101) == {'MML': True, 'MMWP': False, 'RLB': True}
    assert decode_mseccfg(0) == {'MML': False, 'MMWP': False, 'RLB': False}


def test_module_documents_layout():
    from directed_streams.streams import security_config_stream
    assert "csrrwi  zero, mseccfg" in security_config_stream.__doc__
