"""
Offboarding Domain

Turns a decision that an employee is leaving into a scoped, audited
workflow: template selection, task materialization, per-task and per-run
state, automated actions and side effects.
"""
