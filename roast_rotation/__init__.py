"""
roast_rotation package: roster models, fair duty shuffle, manual swaps, daily gate, store and exports.
"""
__all__ = [
    "models",
    "config",
    "fairness",
    "engine",
    "assignment",
    "scheduler",
    "roster",
    "validation",
    "io",
    "export_pdf",
]
