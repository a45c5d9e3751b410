"""
Notification policy: decides which transitions the cook must hear about.
"""
