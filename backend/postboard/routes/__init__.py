"""
Postboard Backend — API Routes Package
=========================================

Route Inventory:
    - posts.py:     GET    /posts/{category}       (list by category)
                    GET    /posts/{id}             (single post)
                    POST   /posts                  (create)
                    PUT    /posts/{id}             (update, author only)
                    DELETE /posts/{id}             (delete, author only)
    - comments.py:  POST   /posts/{id}/comments    (create)
                    PUT    /comments/{commentId}   (update, author only)
                    DELETE /comments/{commentId}   (delete, author only)
    - health.py:    GET    /health                 (service health check)

Routes stay thin: they read the request, call a service, and wrap the
result. Ownership rules live in the services.
"""
