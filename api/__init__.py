"""
HTTP API for the Job Posting Extractor.
"""
