"""
Verification app

Experience verification workflow: the status state machine, who may trigger
each transition, and the audit and notification side effects that follow.
"""
