"""In-browser preview compilation of a VFS snapshot."""

from uigen.preview.assembler import PREVIEW_SANDBOX, PreviewAssembler, render_state_document
from uigen.preview.entry import EntryDiscovery, find_entry_point
from uigen.preview.importmap import ImportMapResult, create_import_map
from uigen.preview.pipeline import build_preview, raise_for_state
from uigen.preview.resolver import ModuleGraph, ModuleResolver
from uigen.preview.resources import ResourceHandle, ResourceRegistry
from uigen.preview.session import PreviewSession
from uigen.preview.theme import ThemeState
from uigen.preview.transformer import SourceTransformer, TransformResult

__all__ = [
    "PREVIEW_SANDBOX",
    "EntryDiscovery",
    "ImportMapResult",
    "ModuleGraph",
    "ModuleResolver",
    "PreviewAssembler",
    "PreviewSession",
    "ResourceHandle",
    "ResourceRegistry",
    "SourceTransformer",
    "ThemeState",
    "TransformResult",
    "build_preview",
    "create_import_map",
    "find_entry_point",
    "raise_for_state",
    "render_state_document",
]
