"""
Documents Domain

Document templates (termination letters, exit forms) and the employee
documents generated from them.
"""
