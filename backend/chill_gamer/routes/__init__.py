# Routes package init
"""
Chill Gamer Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource.

Route Inventory:
    - reviews.py:    GET/POST /chill-gamer/reviews, GET/PUT/DELETE /chill-gamer/reviews/{id},
                     GET /chill-gamer/reviews/highest-rated, GET /chill-gamer/reviews/user/{email}
    - watchlist.py:  GET /chill-gamer/watchlist/{email}, POST /chill-gamer/watchlist,
                     DELETE /chill-gamer/watchlist/{id}
    - games.py:      GET /chill-gamer/games, GET /chill-gamer/games/{id}
    - users.py:      GET /chill-gamer/users/{email}, POST /chill-gamer/users
    - search.py:     GET /chill-gamer/search/reviews, GET /chill-gamer/genres
    - health.py:     GET /, GET /health

Design Principle:
    Routes are THIN. They extract path/query/body values, call a service,
    and return its result. Store access and error translation live in services.
"""
