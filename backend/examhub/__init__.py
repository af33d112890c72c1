"""ExamHub Application Package — role-gated exam catalog backend.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
