"""Packages a program and the correspondence maps for downstream tools."""

from dataclasses import dataclass
from typing import Optional

from .compiler import Program
from .node_maps import AstMaps, NativeToStandardMap, StandardToNativeMap


@dataclass(frozen=True)
class ParserServices:
    """
    Services exported by ``parse_and_generate_services``.

    ``program`` is None when no project covers the file. The map views are
    None when node maps were not preserved.
    """
    program: Optional[Program]
    native_to_standard_map: Optional[NativeToStandardMap]
    standard_to_native_map: Optional[StandardToNativeMap]

    @property
    def has_full_type_information(self) -> bool:
        return self.program is not None


def create_parser_services(program: Optional[Program], maps: AstMaps,
                           preserve_node_maps: bool) -> ParserServices:
    if not preserve_node_maps:
        return ParserServices(program=program, native_to_standard_map=None, standard_to_native_map=None)
    return ParserServices(
        program=program,
        native_to_standard_map=maps.native_to_standard,
        standard_to_native_map=maps.standard_to_native,
    )
