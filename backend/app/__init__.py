"""
Tasktrack backend application package.
"""
