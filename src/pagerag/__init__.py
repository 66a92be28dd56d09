"""Page-aware RAG over parsed documents: segmentation, page attribution, citations."""

__version__ = "0.1.0"
