"""Field Attendance package.

Feature modules (attendance, roster, messaging, reports, ...) hold pure
domain logic over immutable snapshots; persistence and the Flask layer are
thin collaborators wired in ``container``.
"""
