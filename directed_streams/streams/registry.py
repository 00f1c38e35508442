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

from typing import Dict, Optional, Tuple, Type

from .base import DirectedStream, GenContext

# Type: stream_type -> stream class
Registry = Dict[str, Type[DirectedStream]]

STREAM_REGISTRY: Registry = {}


def register_stream(cls: Type[DirectedStream]) -> Type[DirectedStream]:
    """
    Class decorator adding a stream to the registry under its `stream_type`.
    """
    key = cls.stream_type
    if not key:
        raise ValueError(f"{cls.__name__} has no stream_type")
    if key in STREAM_REGISTRY and STREAM_REGISTRY[key] is not cls:
        raise ValueError(f"stream type '{key}' already registered by {STREAM_REGISTRY[key].__name__}")
    STREAM_REGISTRY[key] = cls
    return cls


def get_stream_class(stream_type: str) -> Type[DirectedStream]:
    try:
        return STREAM_REGISTRY[stream_type]
    except KeyError:
        raise KeyError(f"Unknown stream type '{stream_type}', known: {available_streams()}") from None


def available_streams() -> Tuple[str, ...]:
    return tuple(sorted(STREAM_REGISTRY))


def create_stream(stream_type: str, ctx: GenContext, label: Optional[str] = None) -> DirectedStream:
    """
    Instantiate a registered stream with a name unique within `ctx`.
    An entry label, if given, is claimed in the context's label manager.
    """
    cls = get_stream_class(stream_type)
    name = ctx.labels.generate_stream_name(stream_type)
    if label:
        ctx.labels.claim(label)
    return cls(name, label=label or "")
