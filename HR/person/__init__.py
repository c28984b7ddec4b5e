"""
Person Domain

Employee records owned by the broader HR domain. The offboarding engine
only mutates an employee's lifecycle status and termination date.
"""
