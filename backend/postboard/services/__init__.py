"""
Postboard Backend — Services Package
======================================

What:  Business logic layer between routes and the repository.

Services:
    - post_service.py:     PostService (list, get, create, update, delete)
    - comment_service.py:  CommentService (create, update, delete)

Both are stateless singletons; the repository for the current request and
the authenticated caller are passed into every call.
"""
