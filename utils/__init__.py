"""
Text and configuration helpers.
"""
