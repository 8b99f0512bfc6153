"""
API package.

``router`` bundles the resource routers; each resource lives in its
own module under ``endpoints``.
"""
