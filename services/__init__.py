"""
Service layer for AWS, HTTP and XML operations.

Each service wraps one external system and keeps its client setup,
logging and error translation out of the calling code.
"""
