"""
badddy.email

Transactional email package (useSend provider, HTML templates, use-case service).
"""

# Package marker.
