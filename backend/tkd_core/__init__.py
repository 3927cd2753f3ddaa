"""tkd-core: academy management backend (ranks, promotions, classes, attendance).

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
