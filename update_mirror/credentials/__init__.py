"""
Credentials — Short-lived storage credentials for one sync.

Tokens are opaque here. They are appended to the destination URL at
mirror time and are never logged or persisted.
"""
