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

from directed_streams.instr_generator.generator import FILLER_CATEGORIES
from directed_streams.instr_generator.instruction import SymbolicImm
from directed_streams.streams import BreakpointStream


def test_layout(ctx):
    stream = BreakpointStream("breakpoint_0")
    result = stream.run(ctx)

    assert not result.skipped
    instrs = result.instrs
    assert 7 <= len(instrs) <= 12

    head, trap, fillers = instrs[0], instrs[1], instrs[2:]
    label = fillers[-1].label
    assert label == "breakpoint_0_bkpt"
    assert head.name == 'la'
    assert head.rd == ctx.regs.addr_reg
    assert head.imm == SymbolicImm(label, 4)
    assert trap.name == 'ebreak'
    assert [i.label for i in instrs[:-1]] == [None] * (len(instrs) - 1)
    assert all(i.atomic for i in instrs)


def test_fillers_leave_scratch_registers_alone(ctx):
    instrs = BreakpointStream("breakpoint_0").run(ctx, filler_count=10).instrs
    for instr in instrs[2:]:
        assert instr.category in FILLER_CATEGORIES
        assert not ctx.regs.is_reserved(instr.rd)


def test_pinned_filler_count(ctx):
    instrs = BreakpointStream("breakpoint_0").run(ctx, filler_count=5).instrs
    assert len(instrs) == 7


def test_filler_count_must_be_positive(ctx):
    with pytest.raises(ValueError):
        BreakpointStream("breakpoint_0").run(ctx, filler_count=0)


def test_boundary_comments(ctx):
    instrs = BreakpointStream("breakpoint_0").run(ctx).instrs
    assert instrs[0].comment == "Start breakpoint_0"
    assert instrs[-1].comment == "End breakpoint_0"


def test_rendered_reference(ctx):
    instrs = BreakpointStream("breakpoint_3").run(ctx).instrs
    assert instrs[0].text() == f"la {ctx.regs.addr_reg}, breakpoint_3_bkpt+4"
    assert str(instrs[-1]).startswith("breakpoint_3_bkpt: ")


def test_two_streams_get_distinct_labels(ctx):
    first = BreakpointStream(ctx.labels.generate_stream_name("breakpoint")).run(ctx).instrs
    second = BreakpointStream(ctx.labels.generate_stream_name("breakpoint")).run(ctx).instrs
    assert first[-1].label != second[-1].label


def test_same_name_twice_is_rejected(ctx):
    BreakpointStream("breakpoint_0").run(ctx)
    with pytest.raises(ValueError):
        BreakpointStream("breakpoint_0").run(ctx)


def test_same_instance_runs_twice(ctx):
    stream = BreakpointStream("breakpoint_0")
    first = stream.run(ctx, filler_count=2).instrs
    second = stream.run(ctx, filler_count=3).instrs
    assert first[-1].label == second[-1].label == "breakpoint_0_bkpt"
    assert len(second) == 5
    assert [instr.label for instr in second].count("breakpoint_0_bkpt") == 1
    assert second[0].text() == f"la {ctx.regs.addr_reg}, breakpoint_0_bkpt+4"


def test_same_instance_in_a_new_program(make_ctx):
    stream = BreakpointStream("breakpoint_0")
    stream.run(make_ctx(seed=1))
    other = make_ctx(seed=2)
    stream.run(other)
    assert other.labels.is_used("breakpoint_0_bkpt")
