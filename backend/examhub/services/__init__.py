"""Services Layer — one service per resource, built on the TableGateway protocol.

Invariants:
    - Every remote call runs inside remote_operation (failure translation)
    - Services raise ExamHubError subclasses; they never build HTTP responses
"""
