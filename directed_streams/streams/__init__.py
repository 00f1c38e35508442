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

from .base import (
    DirectedStream,
    GenContext,
    Generated,
    Skipped,
    StreamResult,
    StreamInvariantError,
)
from .registry import (
    STREAM_REGISTRY,
    register_stream,
    get_stream_class,
    available_streams,
    create_stream,
)
from .pmp import (
    PmpAddrMode,
    PmpRegionCfg,
    PmpConfigView,
    NapotGeometry,
    decode_napot,
    encode_napot_addr,
    random_pmp_config,
)

# Importing the stream modules registers them
from .breakpoint_stream import BreakpointStream
from .security_config_stream import SecurityConfigStream
from .napot_setup_stream import NapotRegionSetupStream
from .cross_pmp_access_stream import CrossPmpRegionAccessStream

__all__ = [
    "DirectedStream",
    "GenContext",
    "Generated",
    "Skipped",
    "StreamResult",
    "StreamInvariantError",
    "STREAM_REGISTRY",
    "register_stream",
    "get_stream_class",
    "available_streams",
    "create_stream",
    "PmpAddrMode",
    "PmpRegionCfg",
    "PmpConfigView",
    "NapotGeometry",
    "decode_napot",
    "encode_napot_addr",
    "random_pmp_config",
    "BreakpointStream",
    "SecurityConfigStream",
    "NapotRegionSetupStream",
    "CrossPmpRegionAccessStream",
]
