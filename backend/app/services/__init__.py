"""
Business services package.
"""
