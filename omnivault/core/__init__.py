"""Core building blocks: storage, note store, graph heuristics and AI providers."""
