"""
Work Structures Domain

Organizational units employees are attached to. Only departments are
modelled here; offboarding templates can be restricted to one.
"""
