"""
Bucket Bouncer: signed-request authentication for internal services.

Implements the S3-style canonical string and HMAC-SHA1 signature scheme
shared by the bucket bouncer service and its clients.
"""

__version__ = "1.0.0"
