"""Structure-preserving segmentation and page-attributed chunk assembly."""

from pagerag.chunking.assembler import ChunkAssembler
from pagerag.chunking.page_index import OffsetPageIndex, build_page_index
from pagerag.chunking.schemas import Chunk, ChunkMetadata, ContentKind, Segment
from pagerag.chunking.segmenter import StructuralSegmenter

__all__ = [
    "Chunk",
    "ChunkAssembler",
    "ChunkMetadata",
    "ContentKind",
    "OffsetPageIndex",
    "Segment",
    "StructuralSegmenter",
    "build_page_index",
]
