"""
Todo API - multi-user task list service.
"""
