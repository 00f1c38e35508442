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

from directed_streams.asm_template_manager import create_template_instance
from directed_streams.core.program_builder import (
    build_main_body,
    check_program_labels,
    insert_streams,
    render_instrs,
    render_program,
)
from directed_streams.instr_generator.generator import generate_filler_instrs
from directed_streams.instr_generator.instruction import DirectedInstr, SymbolicImm
from directed_streams.streams import BreakpointStream, NapotRegionSetupStream, StreamInvariantError


def _position(merged, instr):
    return next(i for i, x in enumerate(merged) if x is instr)


def test_atomic_streams_stay_contiguous(ctx):
    body = generate_filler_instrs(50, ctx.rng, ctx.regs)
    bkpt = BreakpointStream("breakpoint_0").run(ctx).instrs
    napot = NapotRegionSetupStream("napot_setup_0").run(ctx).instrs

    merged = insert_streams(body, [bkpt, napot], ctx.rng)
    assert len(merged) == len(body) + len(bkpt) + len(napot)
    for stream in (bkpt, napot):
        start = _position(merged, stream[0])
        assert all(a is b for a, b in zip(merged[start:start + len(stream)], stream))


def test_body_order_kept(ctx):
    body = generate_filler_instrs(30, ctx.rng, ctx.regs)
    bkpt = BreakpointStream("breakpoint_0").run(ctx).instrs
    merged = insert_streams(body, [bkpt], ctx.rng)
    remaining = [x for x in merged if any(x is b for b in body)]
    assert all(a is b for a, b in zip(remaining, body))
    assert len(remaining) == len(body)


def test_non_atomic_streams_keep_relative_order(ctx):
    body = generate_filler_instrs(40, ctx.rng, ctx.regs)
    loose = [DirectedInstr('nop', comment=f"n{i}") for i in range(5)]
    merged = insert_streams(body, [loose], ctx.rng)
    positions = [_position(merged, i) for i in loose]
    assert positions == sorted(positions)


def test_empty_body(ctx):
    bkpt = BreakpointStream("breakpoint_0").run(ctx).instrs
    assert insert_streams([], [bkpt], ctx.rng) == list(bkpt)


def test_duplicate_labels_across_streams():
    a = DirectedInstr('nop', label='same')
    b = DirectedInstr('nop', label='same')
    with pytest.raises(StreamInvariantError):
        check_program_labels([a, b])


def test_undefined_reference():
    with pytest.raises(StreamInvariantError):
        check_program_labels([DirectedInstr('la', rd='s11', imm=SymbolicImm('missing'))])


def test_main_body_contains_streams(ctx):
    bkpt = BreakpointStream("breakpoint_0").run(ctx).instrs
    body = build_main_body(100, [bkpt], ctx.rng, ctx.regs)
    assert len(body) == 100 + len(bkpt)
    text = render_instrs(body, ctx.arch)
    assert "breakpoint_0_bkpt+4" in text
    assert "breakpoint_0_bkpt:" in text
    assert "# Start breakpoint_0" in text


def test_render_program(ctx):
    bkpt = BreakpointStream("breakpoint_0").run(ctx).instrs
    body = build_main_body(20, [bkpt], ctx.rng, ctx.regs)
    template = create_template_instance(ctx.arch, ctx.regs)
    text = render_program(template, body, ctx.arch)

    assert text.index("main:") < text.index("breakpoint_0_bkpt:") < text.index("write_tohost:")
    assert "MAIN_BODY_HOOK" not in text
    assert text.endswith("\n")
